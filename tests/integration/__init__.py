"""
HTTP-level tests for the auth and task endpoints.

Tests use the Flask test client and cover status codes, response
envelopes, validation errors and ownership scoping.
"""
