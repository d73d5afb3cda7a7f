from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sendrec.domain.emails import is_valid_email, normalize_email
from sendrec.services.waitlist_service import WaitlistStore

router = APIRouter(tags=["waitlist"])
logger = logging.getLogger(__name__)


def get_waitlist_store(request: Request) -> WaitlistStore:
    store = getattr(getattr(request.app, "state", None), "waitlist_store", None)
    if not store:
        raise RuntimeError("WaitlistStore not configured")
    return store


def _reply(status_code: int, success: bool, message: str) -> JSONResponse:
    return JSONResponse({"success": success, "message": message}, status_code=status_code)


@router.post("/waitlist")
async def join_waitlist(request: Request):
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        return _reply(400, False, "Invalid JSON")
    if not isinstance(payload, dict):
        return _reply(400, False, "Invalid JSON")
    raw_email = payload.get("email")
    if raw_email is not None and not isinstance(raw_email, str):
        return _reply(400, False, "Invalid JSON")

    email = normalize_email(raw_email)
    if not email:
        return _reply(400, False, "Email is required")
    if not is_valid_email(email):
        return _reply(400, False, "Invalid email format")

    store = get_waitlist_store(request)
    entry, added = await run_in_threadpool(store.add, email)
    if not added:
        return _reply(409, False, "Email already registered")

    logger.info("New waitlist entry: id=%d email=%s", entry.id, entry.email)
    return _reply(201, True, "Successfully joined the waitlist!")
