"""
Admin credential check.

Why: The admin auth modal only collects a credential. Deciding whether it is
valid happens here, server-side, behind a narrow port so the web layer and
its tests do not depend on how admins are verified.
"""
from __future__ import annotations

from dataclasses import dataclass
import hmac
import logging
import os
from typing import Any, Mapping, Optional, Protocol

from .domain import Role

logger = logging.getLogger("symptomdx.identity_access")

MIN_PASSWORD_LENGTH = 6


class AdminAuthError(Exception):
    """Raised when an admin credential is rejected."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class AdminAuthResult:
    sub: str
    message: str = "Admin authentication successful"


class AdminAuthenticator(Protocol):
    def authenticate(self, user: Mapping[str, Any], credential: str) -> AdminAuthResult: ...


class PasswordAdminAuthenticator:
    """Shared admin password check for users that already hold the admin role."""

    def __init__(self, password: Optional[str]):
        self._password = password or ""

    @classmethod
    def from_env(cls) -> "PasswordAdminAuthenticator":
        # ADMIN_ACCESS_PASSWORD is the name used by existing deployments.
        return cls(os.getenv("ADMIN_ACCESS_PASSWORD") or os.getenv("ADMIN_PASSWORD"))

    def authenticate(self, user: Mapping[str, Any], credential: str) -> AdminAuthResult:
        sub = str(user.get("sub") or "")
        try:
            return self._check(user, sub, credential)
        except AdminAuthError as exc:
            logger.info("Admin authentication rejected: code=%s sub=%s", exc.code, sub)
            raise

    def _check(self, user: Mapping[str, Any], sub: str, credential: str) -> AdminAuthResult:
        value = credential if isinstance(credential, str) else ""
        if not value.strip():
            raise AdminAuthError("password_required", "Password is required")
        if len(value) < MIN_PASSWORD_LENGTH:
            raise AdminAuthError(
                "password_too_short", f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if Role.parse(user.get("role")) is not Role.ADMIN:
            raise AdminAuthError("forbidden", "Admin role required.")
        if not self._password:
            raise AdminAuthError("not_configured", "Admin authentication is not configured.")
        if not hmac.compare_digest(self._password.encode("utf-8"), value.encode("utf-8")):
            raise AdminAuthError("invalid_password", "Invalid admin password.")
        return AdminAuthResult(sub=sub)
