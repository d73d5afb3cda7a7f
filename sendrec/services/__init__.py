"""
High-level use cases for the SendRec waitlist.

Routers (FastAPI endpoints) call these services instead of manipulating the
snapshot file directly.
"""
