"""
In-memory admin grant store for development and tests.

Why: The admin gate must be verified server-side. The browser only carries
an opaque grant id in a session cookie; whether that id unlocks the admin
area is decided here. For production, use the DB-backed store.

Security: Grants are bound to the identity provider subject that earned them,
so a copied cookie does not unlock the area for a different user.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import secrets
import time


def _now() -> int:
    return int(time.time())


# Upper bound for one browser session; the cookie itself ends with the browser.
GRANT_TTL_SECONDS = 12 * 3600


@dataclass(frozen=True)
class AdminGrant:
    grant_id: str
    sub: str
    created_at: int


class AdminGrantStore:
    def __init__(self, ttl_seconds: int = GRANT_TTL_SECONDS):
        self._data: Dict[str, AdminGrant] = {}
        self._ttl_seconds = ttl_seconds

    def create(self, *, sub: str) -> AdminGrant:
        self._prune()
        grant = AdminGrant(grant_id=secrets.token_urlsafe(24), sub=sub, created_at=_now())
        self._data[grant.grant_id] = grant
        return grant

    def get(self, grant_id: str) -> Optional[AdminGrant]:
        grant = self._data.get(grant_id)
        if not grant:
            return None
        if grant.created_at + self._ttl_seconds < _now():
            self._data.pop(grant_id, None)
            return None
        return grant

    def _prune(self) -> None:
        cutoff = _now() - self._ttl_seconds
        for grant_id in [g.grant_id for g in self._data.values() if g.created_at < cutoff]:
            self._data.pop(grant_id, None)
