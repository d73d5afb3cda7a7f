from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from sendrec.routers.waitlist import get_waitlist_store

router = APIRouter(tags=["admin"])


def _get_templates(request: Request) -> Jinja2Templates:
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


@router.get("/admin", response_class=HTMLResponse)
def view_waitlist(request: Request):
    entries = get_waitlist_store(request).get_all()
    templates = _get_templates(request)
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"entries": entries, "total": len(entries)},
    )
