"""
Test suite for the task manager API.

This package contains:
- unit/: token codec, auth gate, validation, models and account service
- integration/: HTTP-level tests through the Flask test client
- security/: ownership isolation and mass-assignment hardening
"""
