"""
Run the SendRec waitlist server.

Usage:
  python -m sendrec            # host/port from HOST / PORT (default 0.0.0.0:8080)
"""
from __future__ import annotations

import logging

import uvicorn

from sendrec.app import ENDPOINTS, create_app
from sendrec.core.config import get_settings
from sendrec.core.logging import setup_logging
from sendrec.repositories.json_storage import PersistenceError

logger = logging.getLogger("sendrec")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    try:
        app = create_app(settings)
    except PersistenceError as exc:
        logger.error("Failed to initialize store: %s", exc)
        raise SystemExit(1) from exc

    logger.info("SendRec server starting on http://localhost:%d", settings.port)
    logger.info("Endpoints:")
    for method, path, label in ENDPOINTS:
        logger.info("  %-4s %-14s - %s", method, path, label)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
