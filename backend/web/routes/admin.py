"""
Admin area routes behind the session gate.

Why:
    Every admin tool renders through the same gate so the unlock state is
    checked server-side on each request. The browser only carries an opaque
    grant id; the grant store decides whether it unlocks anything.

Notes:
    - Shared state (grant store, authenticator, settings) lives in `main` and
      is imported inside functions so tests can swap it.
    - Responses that depend on the gate are marked `private, no-store`.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from components import Layout
from components.admin_gate import AdminAuthModal, AdminGateLayout
from components.pages import AdminSectionPage, ADMIN_SECTIONS
from identity_access.admin_auth import AdminAuthError
from identity_access.admin_gate import AdminGate

try:
    from ..auth_utils import cookie_opts, is_inapp_path
except ImportError:  # flat layout (backend/web on sys.path)
    from auth_utils import cookie_opts, is_inapp_path


admin_router = APIRouter(tags=["Admin"])
logger = logging.getLogger("symptomdx.web.admin")

ADMIN_GATE_COOKIE = "symptomdx_admin_gate"
ADMIN_HOME = "/admin"
NO_STORE = {"Cache-Control": "private, no-store"}


def _gate_for(request: Request) -> AdminGate:
    import main  # type: ignore

    user = request.state.user
    return AdminGate(main.GRANT_STORE, sub=user["sub"], grant_id=request.cookies.get(ADMIN_GATE_COOKIE))


def _safe_next(value: Optional[str]) -> str:
    """Only admin paths inside this app are valid post-auth targets."""
    if is_inapp_path(value) and (value == ADMIN_HOME or value.startswith(ADMIN_HOME + "/")):
        if _section_key(value) in ADMIN_SECTIONS:
            return value
    return ADMIN_HOME


def _section_key(path: str) -> str:
    return path[len(ADMIN_HOME):].strip("/")


def _render_gate(
    request: Request,
    gate: AdminGate,
    *,
    next_path: str,
    error: Optional[str] = None,
    status_code: int = 200,
) -> HTMLResponse:
    key = _section_key(next_path)
    user = request.state.user
    children = ""
    if gate.is_unlocked:
        section = ADMIN_SECTIONS[key]
        children = Layout(
            title=section.title,
            description=section.description,
            content=AdminSectionPage(key).render(),
            user=user,
            current_path=next_path,
        ).render()
    html = AdminGateLayout(
        gate.state,
        children,
        AdminAuthModal(next_path=next_path, error=error, open=gate.modal_open),
        user=user,
        current_path=next_path,
    ).render()
    return HTMLResponse(html, status_code=status_code, headers=NO_STORE)


@admin_router.get("/admin", response_class=HTMLResponse)
async def admin_home(request: Request):
    return await admin_page(request, "")


@admin_router.get("/admin/{section}", response_class=HTMLResponse)
async def admin_page(request: Request, section: str):
    """
    Render an admin tool, or the restricted placeholder plus auth modal.

    Permissions:
        Signed-in user; the tool itself only renders once the gate is unlocked.
    """
    if section not in ADMIN_SECTIONS:
        raise HTTPException(status_code=404, detail="not_found")
    gate = _gate_for(request)
    gate.check_existing_session()
    return _render_gate(request, gate, next_path=request.url.path)


@admin_router.post("/admin/auth")
async def admin_auth(request: Request):
    """Check the admin credential; unlock the gate for this browser session on success."""
    import main  # type: ignore

    form = await request.form()
    password = str(form.get("password") or "")
    next_path = _safe_next(form.get("next"))
    gate = _gate_for(request)
    gate.check_existing_session()
    if gate.is_unlocked:
        return RedirectResponse(url=next_path, status_code=303, headers=NO_STORE)

    try:
        main.ADMIN_AUTHENTICATOR.authenticate(request.state.user, password)
    except AdminAuthError as exc:
        status_code = 403 if exc.code == "forbidden" else 401
        return _render_gate(request, gate, next_path=next_path, error=exc.message, status_code=status_code)

    grant = gate.on_auth_success()
    logger.info("Admin gate unlocked: sub=%s", grant.sub)
    resp = RedirectResponse(url=next_path, status_code=303, headers=NO_STORE)
    opts = cookie_opts(main.SETTINGS.environment)
    # No max_age: the grant cookie ends with the browser session.
    resp.set_cookie(
        key=ADMIN_GATE_COOKIE,
        value=grant.grant_id,
        httponly=True,
        secure=opts["secure"],
        samesite=opts["samesite"],
        path="/",
    )
    return resp


@admin_router.post("/admin/auth/dismiss")
async def admin_auth_dismiss(request: Request):
    """Close the modal; a still-locked user leaves the admin area."""
    form = await request.form()
    next_path = _safe_next(form.get("next"))
    gate = _gate_for(request)
    gate.check_existing_session()
    target = gate.on_modal_dismiss() or next_path
    if "HX-Request" in request.headers:
        return Response(status_code=204, headers={"HX-Redirect": quote(target, safe="/"), **NO_STORE})
    return RedirectResponse(url=target, status_code=303, headers=NO_STORE)
