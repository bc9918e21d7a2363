"""
Sign-in routes.

The identity provider's widget does the actual sign-in; this router only
serves the page that mounts it. The catch-all path lets the widget run its
multi-step flows (`/sign-in/factor-one`, `/sign-in/sso-callback`, ...).
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from components.pages import SignInPage

try:
    from ..auth_utils import is_inapp_path
except ImportError:  # flat layout (backend/web on sys.path)
    from auth_utils import is_inapp_path


auth_router = APIRouter(tags=["Auth"])  # explicit paths, no prefix


def _render_sign_in(request: Request) -> HTMLResponse:
    import main  # type: ignore

    redirect_url = request.query_params.get("redirect_url")
    if not is_inapp_path(redirect_url):
        redirect_url = None
    cfg = main.IDENTITY_CFG
    page = SignInPage(cfg.frontend_api_url, redirect_url=redirect_url, publishable_key=cfg.publishable_key)
    return HTMLResponse(page.render(), headers={"Cache-Control": "private, no-store"})


@auth_router.get("/sign-in", response_class=HTMLResponse)
async def sign_in(request: Request):
    return _render_sign_in(request)


@auth_router.get("/sign-in/{rest:path}", response_class=HTMLResponse)
async def sign_in_step(request: Request, rest: str):
    return _render_sign_in(request)


@auth_router.get("/sign-up")
async def sign_up(request: Request):
    """Self-service sign-up runs inside the same widget."""
    return RedirectResponse(url="/sign-in", status_code=302)
