"""Security tests: tenant isolation and mass-assignment hardening."""
