"SymptomDx web"
from __future__ import annotations

from pathlib import Path
import logging
import os
import sys as _sys
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from components import Layout
from components.pages import LandingPage
from identity_access.admin_auth import PasswordAdminAuthenticator
from identity_access.domain import ONBOARDING_PATH
from identity_access.stores import AdminGrantStore
from identity_access.tokens import SessionTokenError, SessionTokenVerifier, load_identity_config
from jobs.client import JOB_CLIENT
from jobs.functions import JOB_FUNCTIONS

try:
    from . import config as _cfg
except ImportError:
    import config as _cfg  # type: ignore

# Ensure legacy imports consistently reference the same module instance.
if __name__ == "main":
    _sys.modules.setdefault("backend.web.main", _sys.modules[__name__])
elif __name__ == "backend.web.main":
    _sys.modules["main"] = _sys.modules[__name__]


def _under_pytest() -> bool:
    return "pytest" in _sys.modules or bool(os.getenv("PYTEST_CURRENT_TEST"))


def _should_load_dotenv() -> bool:
    """Decide if we should load local .env files.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via SYMPTOMDX_ENABLE_DOTENV (default true
      outside pytest).
    """
    if _under_pytest():
        return False
    flag = (os.getenv("SYMPTOMDX_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    from dotenv import load_dotenv

    # .env.local wins over .env; real environment variables win over both.
    load_dotenv(".env.local")
    load_dotenv(".env")

# Fail fast before any route exists: no database, no app.
DATABASE = _cfg.load_database_config()
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------

class AuthSettings:
    def __init__(self) -> None:
        self._env_override: str | None = None

    @property
    def environment(self) -> str:
        if self._env_override is not None:
            return self._env_override
        return os.getenv("SYMPTOMDX_ENV", "dev").lower()

    def override_environment(self, env: str | None) -> None:
        """Override environment for tests (e.g., "prod"), or reset with None."""
        self._env_override = env


logger = logging.getLogger("symptomdx.identity_access")
SETTINGS = AuthSettings()

app = FastAPI(title="SymptomDx", description="AI-assisted symptom analysis", version="0.1.0")

# --- Static Files & Routers -----------------------------------------------------

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

from routes.auth import auth_router
from routes.onboarding import onboarding_router
from routes.admin import admin_router
from routes.jobs import JOB_WEBHOOK_PATH, mount_job_webhook

# --- Identity & Admin Gate Setup ------------------------------------------------

IDENTITY_CFG = load_identity_config()
SESSION_VERIFIER = SessionTokenVerifier(IDENTITY_CFG)
ADMIN_AUTHENTICATOR = PasswordAdminAuthenticator.from_env()

if (not _under_pytest()) and os.getenv("SESSIONS_BACKEND", "memory").lower() == "db":
    from identity_access.stores_db import DBAdminGrantStore
    GRANT_STORE = DBAdminGrantStore(dsn=DATABASE.url)
else:
    GRANT_STORE = AdminGrantStore()

# --- Auth Helpers & Middleware --------------------------------------------------

def _is_public_path(path: str) -> bool:
    if path in ("/", "/health", "/favicon.ico", "/sign-in", "/sign-up"):
        return True
    if path == JOB_WEBHOOK_PATH or path.startswith(JOB_WEBHOOK_PATH + "/"):
        return True
    return path.startswith(("/sign-in/", "/sign-up/", "/static/"))


def _is_onboarding_path(path: str) -> bool:
    return path == ONBOARDING_PATH or path.startswith(ONBOARDING_PATH + "/")


def _skips_identity(path: str) -> bool:
    """Paths that never look at the signed-in user."""
    if path in ("/health", "/favicon.ico") or path.startswith("/static/"):
        return True
    return path == JOB_WEBHOOK_PATH or path.startswith(JOB_WEBHOOK_PATH + "/")


def _verify_session(token: str) -> dict | None:
    # Blocking: may fetch the JWKS over the network. Run it in the threadpool.
    try:
        claims = SESSION_VERIFIER.verify(token)
    except SessionTokenError as exc:
        logger.info("Session token rejected: code=%s", exc.code)
        return None
    return claims.as_user()


def _unauthenticated(request: Request) -> Response:
    path = request.url.path
    if path.startswith("/api/"):
        headers = {"Cache-Control": "private, no-store", "Vary": "Origin"}
        return JSONResponse({"error": "unauthenticated"}, status_code=401, headers=headers)
    target = f"/sign-in?redirect_url={quote(path, safe='/')}"
    if "HX-Request" in request.headers:
        # Security: prevent intermediaries from caching unauthenticated HTMX responses
        return Response(status_code=401, headers={"HX-Redirect": target, "Cache-Control": "private, no-store", "Vary": "HX-Request"})
    return RedirectResponse(url=target, status_code=302)


@app.middleware("http")
async def auth_enforcement(request: Request, call_next):
    path = request.url.path
    token = request.cookies.get(IDENTITY_CFG.session_cookie)
    user = None
    if token and not _skips_identity(path):
        user = await run_in_threadpool(_verify_session, token)
    # Public pages still see who is signed in (landing page call to action).
    request.state.user = user
    if _is_public_path(path):
        return await call_next(request)
    if user is None:
        return _unauthenticated(request)
    if not user["onboarding_complete"] and not _is_onboarding_path(path) and not path.startswith("/api/"):
        return RedirectResponse(url=ONBOARDING_PATH, status_code=302)
    return await call_next(request)

# --- Security Headers Middleware ----------------------------------------------

@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    # The identity widget loads its script from the provider's frontend API.
    widget_origin = (IDENTITY_CFG.frontend_api_url or "").rstrip("/")
    script_src = "'self'" + (f" {widget_origin}" if widget_origin else "")
    connect_src = script_src

    if SETTINGS.environment == "prod":
        # Harden CSP in production: avoid 'unsafe-inline' to reduce XSS surface.
        csp = (
            f"default-src 'self'; script-src {script_src}; style-src 'self'; "
            f"img-src 'self' data:; font-src 'self' data:; connect-src {connect_src}; frame-src {connect_src};"
        )
    else:
        # Developer experience: allow inline for local SSR components.
        csp = (
            f"default-src 'self'; script-src {script_src} 'unsafe-inline'; style-src 'self' 'unsafe-inline'; "
            f"img-src 'self' data:; font-src 'self' data:; connect-src {connect_src}; frame-src {connect_src};"
        )
    response.headers.setdefault("Content-Security-Policy", csp)
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    if SETTINGS.environment == "prod":
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    # HSTS: always on (dev = prod)
    response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response

# --- Routes -------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def landing(request: Request):
    user = getattr(request.state, "user", None)
    html = Layout(
        title="SymptomDx",
        content=LandingPage(signed_in=user is not None).render(),
        user=user,
        current_path="/",
    ).render()
    return HTMLResponse(html)


app.include_router(auth_router)
app.include_router(onboarding_router)
app.include_router(admin_router)
mount_job_webhook(app, JOB_CLIENT, JOB_FUNCTIONS, serve_path=JOB_WEBHOOK_PATH)
