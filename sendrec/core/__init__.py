"""
Core utilities shared across the SendRec service.

This package hosts:
- configuration helpers (env vars, data file location, port)
- logging setup
- synchronisation primitives used by the waitlist store
"""
