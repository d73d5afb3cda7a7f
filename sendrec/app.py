from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from sendrec.core.config import Settings, get_settings
from sendrec.routers import admin as admin_router
from sendrec.routers import waitlist as waitlist_router
from sendrec.services.waitlist_service import WaitlistStore

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "web")
TEMPLATES = os.path.join(BASE, "templates")

ENDPOINTS = (
    ("GET", "/", "Landing page"),
    ("POST", "/waitlist", "Join waitlist"),
    ("GET", "/admin", "View waitlist"),
    ("GET", "/health", "Health check"),
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "script-src 'self' 'unsafe-inline'; "
            "connect-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _cors_origins(settings: Settings) -> list[str]:
    allowed = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed.update(
            {
                f"http://localhost:{settings.port}",
                f"http://127.0.0.1:{settings.port}",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Optional[Settings] = None, store: Optional[WaitlistStore] = None) -> FastAPI:
    """Build the FastAPI app. Raises PersistenceError when the snapshot is corrupt."""
    settings = settings or get_settings()
    if store is None:
        store = WaitlistStore.open(settings.data_file)
        logger.info("Waitlist data file: %s", os.path.abspath(settings.data_file))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Flushing waitlist snapshot before shutdown")
        app.state.waitlist_store.close()

    app = FastAPI(title="SendRec Waitlist", lifespan=lifespan)
    app.state.settings = settings
    app.state.waitlist_store = store
    app.state.templates = Jinja2Templates(directory=TEMPLATES)

    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Accept"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.mount("/static", StaticFiles(directory=WEB), name="static")

    @app.get("/", include_in_schema=False)
    def landing():
        return FileResponse(os.path.join(WEB, "index.html"), media_type="text/html")

    @app.get("/health")
    def health():
        return {"status": "ok", "entries": app.state.waitlist_store.count()}

    app.include_router(waitlist_router.router)
    app.include_router(admin_router.router)
    return app
