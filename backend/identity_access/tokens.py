"""
Session token verification for the identity_access bounded context.

Why: The external identity provider keeps the browser signed in with a
short-lived session JWT in a cookie. Validating it here keeps cryptography
out of the web adapter so it can be unit tested and swapped independently.

Security: Validates the signature against the provider's JWKS, the issuer,
the authorized party (`azp`) when configured, and the temporal claims with a
small clock skew allowance.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
import os
import time

import requests
from jose import jwt
from jose.exceptions import JOSEError

from .domain import Role


class SessionTokenError(Exception):
    """Raised when the session token fails verification."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class IdentityConfig:
    issuer: str  # e.g., https://clerk.symptomdx.example
    jwks_url: str  # e.g., https://clerk.symptomdx.example/.well-known/jwks.json
    authorized_parties: Tuple[str, ...] = ()
    session_cookie: str = "__session"
    frontend_api_url: Optional[str] = None  # browser-facing widget host
    publishable_key: Optional[str] = None  # public widget key, safe to render


def load_identity_config() -> IdentityConfig:
    issuer = (os.getenv("IDP_ISSUER", "https://idp.localhost") or "").rstrip("/")
    jwks_url = os.getenv("IDP_JWKS_URL") or f"{issuer}/.well-known/jwks.json"
    parties = tuple(p.strip() for p in (os.getenv("IDP_AUTHORIZED_PARTIES") or "").split(",") if p.strip())
    return IdentityConfig(
        issuer=issuer,
        jwks_url=jwks_url,
        authorized_parties=parties,
        session_cookie=os.getenv("IDP_SESSION_COOKIE", "__session"),
        frontend_api_url=os.getenv("IDP_FRONTEND_API_URL") or issuer,
        publishable_key=os.getenv("IDP_PUBLISHABLE_KEY") or None,
    )


@dataclass(frozen=True)
class SessionClaims:
    sub: str
    name: str = ""
    role: Optional[Role] = None
    onboarding_complete: bool = False
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def as_user(self) -> Dict[str, Any]:
        """Minimal, read-only user context exposed to request handlers."""
        return {
            "sub": self.sub,
            "name": self.name,
            "role": self.role.value if self.role else None,
            "onboarding_complete": self.onboarding_complete,
        }


@dataclass
class _CacheEntry:
    jwks: Dict[str, object]
    expires_at: float


class JWKSCache:
    """Very small in-memory cache for JWKS responses."""

    def __init__(self, ttl_seconds: int = 300, failure_backoff_seconds: int = 30):
        self.ttl_seconds = ttl_seconds
        self.failure_backoff_seconds = failure_backoff_seconds
        self._entries: Dict[str, _CacheEntry] = {}
        # jwks_url -> time before which a failed fetch is not retried
        self._failed_until: Dict[str, float] = {}

    def get(self, cfg: IdentityConfig) -> Dict[str, object]:
        now = time.time()
        entry = self._entries.get(cfg.jwks_url)
        if entry and entry.expires_at > now:
            return entry.jwks

        if self._failed_until.get(cfg.jwks_url, 0.0) > now:
            raise SessionTokenError("jwks_fetch_failed")
        try:
            jwks = self._fetch(cfg)
        except SessionTokenError:
            self._failed_until[cfg.jwks_url] = now + self.failure_backoff_seconds
            raise
        self._failed_until.pop(cfg.jwks_url, None)
        self._entries[cfg.jwks_url] = _CacheEntry(jwks=jwks, expires_at=now + self.ttl_seconds)
        return jwks

    def _fetch(self, cfg: IdentityConfig) -> Dict[str, object]:
        try:
            resp = requests.get(cfg.jwks_url, timeout=5)
        except requests.RequestException as exc:
            raise SessionTokenError("jwks_fetch_failed") from exc
        if resp.status_code != 200:
            raise SessionTokenError("jwks_fetch_failed")
        try:
            jwks = resp.json()
        except ValueError as exc:
            raise SessionTokenError("jwks_invalid") from exc
        if not isinstance(jwks, dict) or "keys" not in jwks:
            raise SessionTokenError("jwks_invalid")
        return jwks


JWKS_CACHE = JWKSCache()

MAX_CLOCK_SKEW_SECONDS = 5


def verify_session_token(
    *,
    token: str,
    cfg: IdentityConfig,
    cache: JWKSCache | None = None,
) -> Dict[str, object]:
    """Validate a session JWT using the provider JWKS and return its claims.

    Raises
    ------
    SessionTokenError:
        When the token is invalid (malformed, signature, issuer, kid, azp, expiry).
    """
    cache = cache or JWKS_CACHE
    try:
        header = jwt.get_unverified_header(token)
    except JOSEError as exc:
        raise SessionTokenError("malformed_token") from exc
    kid = header.get("kid")
    if not kid:
        raise SessionTokenError("missing_kid")
    key_dict = _find_key(cache.get(cfg), kid)
    if not key_dict:
        raise SessionTokenError("unknown_kid")

    try:
        claims = jwt.decode(
            token,
            key_dict,
            algorithms=[key_dict.get("alg", "RS256")],
            issuer=cfg.issuer,
            options={
                "verify_signature": True,
                "verify_aud": False,
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
                "verify_at_hash": False,
            },
        )
    except JOSEError as exc:
        raise SessionTokenError("invalid_token") from exc

    _validate_temporal_claims(claims)
    if cfg.authorized_parties:
        azp = claims.get("azp")
        if azp is not None and azp not in cfg.authorized_parties:
            raise SessionTokenError("invalid_azp")
    if not claims.get("sub"):
        raise SessionTokenError("missing_sub")
    return claims


def parse_session_claims(claims: Mapping[str, Any]) -> SessionClaims:
    """Extract role and onboarding state from provider claims.

    Providers expose custom user metadata under `metadata` (session token
    template) or `public_metadata`; the first one present wins.
    """
    meta: Mapping[str, Any] = {}
    for key in ("metadata", "public_metadata", "publicMetadata"):
        candidate = claims.get(key)
        if isinstance(candidate, Mapping):
            meta = candidate
            break
    name = claims.get("name") or claims.get("full_name") or ""
    return SessionClaims(
        sub=str(claims.get("sub")),
        name=str(name),
        role=Role.parse(meta.get("role")),
        onboarding_complete=meta.get("onboardingComplete") is True,
        raw=dict(claims),
    )


class SessionTokenVerifier:
    """Verify a session cookie value and return parsed claims."""

    def __init__(self, cfg: IdentityConfig, cache: JWKSCache | None = None):
        self.cfg = cfg
        self._cache = cache or JWKS_CACHE

    def verify(self, token: str) -> SessionClaims:
        claims = verify_session_token(token=token, cfg=self.cfg, cache=self._cache)
        return parse_session_claims(claims)


def _find_key(jwks: Dict[str, object], kid: str) -> Dict[str, object] | None:
    keys = jwks.get("keys")
    if not isinstance(keys, list):
        return None
    for key in keys:
        if isinstance(key, dict) and key.get("kid") == kid:
            return key
    return None


def _validate_temporal_claims(claims: Dict[str, object]) -> None:
    now = time.time()
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        raise SessionTokenError("invalid_token")
    if exp + MAX_CLOCK_SKEW_SECONDS < now:
        raise SessionTokenError("expired_token")

    iat = claims.get("iat")
    if isinstance(iat, (int, float)) and iat - MAX_CLOCK_SKEW_SECONDS > now:
        raise SessionTokenError("invalid_token")

    nbf = claims.get("nbf")
    if isinstance(nbf, (int, float)) and nbf - MAX_CLOCK_SKEW_SECONDS > now:
        raise SessionTokenError("invalid_token")
