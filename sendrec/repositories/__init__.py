"""
Persistence adapters.

These modules encapsulate how waitlist entries are stored/retrieved (today a
JSON snapshot file). Services depend on the storage interface rather than
touching the file directly.
"""
