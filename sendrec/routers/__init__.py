"""
FastAPI routers grouped by concern (signups, admin listing).

Each module exposes an APIRouter included by ``sendrec.app.create_app``.
Routers reach the waitlist store through ``request.app.state``.
"""
