"""Unit tests that exercise single components without the HTTP layer."""
