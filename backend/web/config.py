"""
Configuration and startup checks for SymptomDx.

Why: The app cannot serve a single route without its database, and a
production deployment with placeholder secrets must never come up. This
module provides fail-fast guards without burdening local development.

Permissions: The caller needs no special privileges. The functions read
environment variables and raise `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger("symptomdx.config")


@dataclass(frozen=True)
class DatabaseConfig:
    url: str
    dialect: str = "postgresql"
    schema: str = "public"


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def require_database_url() -> str:
    """Return DATABASE_URL or abort the process with a diagnostic.

    `SystemExit` with a message prints it to stderr and exits with status 1,
    so configuration loading stops before any route is served.
    """
    url = (os.getenv("DATABASE_URL") or "").strip()
    if not url:
        logger.error("DATABASE_URL is not defined in environment variables")
        raise SystemExit(
            "DATABASE_URL is not defined in environment variables. "
            "Please check your .env.local file or environment setup."
        )
    return url


def load_database_config() -> DatabaseConfig:
    return DatabaseConfig(url=require_database_url())


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/stage only):
    - ADMIN_ACCESS_PASSWORD (or ADMIN_PASSWORD) must be set, not a placeholder,
      and at least 6 characters.
    - DATABASE_URL must not explicitly disable TLS.
    - IDP_ISSUER must use https.
    - INNGEST_SIGNING_KEY must be set so job webhook requests are verified.
    """
    env = os.getenv("SYMPTOMDX_ENV", "dev")
    if not _is_prod_like(env):
        return  # dev/test remain permissive

    admin_password = (os.getenv("ADMIN_ACCESS_PASSWORD") or os.getenv("ADMIN_PASSWORD") or "").strip()
    if not admin_password or admin_password.upper().startswith("CHANGE_ME") or len(admin_password) < 6:
        raise SystemExit(
            "Refusing to start: ADMIN_ACCESS_PASSWORD is unset, a placeholder or shorter than 6 characters in production."
        )

    if "sslmode=disable" in os.getenv("DATABASE_URL", ""):
        raise SystemExit(
            "Refusing to start: DATABASE_URL contains sslmode=disable in production. Use sslmode=require or verify TLS."
        )

    issuer = (os.getenv("IDP_ISSUER") or "").strip().lower()
    if not issuer.startswith("https://"):
        raise SystemExit("Refusing to start: IDP_ISSUER must use https in production.")

    if not (os.getenv("INNGEST_SIGNING_KEY") or "").strip():
        raise SystemExit("Refusing to start: INNGEST_SIGNING_KEY is required in production/staging.")
