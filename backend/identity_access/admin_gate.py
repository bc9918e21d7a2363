"""
Session gate for the admin area.

Decides per browser session whether admin-restricted UI may render.

States:
    UNKNOWN  -> before the first check
    LOCKED   -> no valid grant for this browser session
    UNLOCKED -> grant present and bound to the current subject (terminal)

A LOCKED gate becomes UNLOCKED only through `on_auth_success()`. There is no
path back to LOCKED within the same session. Missing, unknown or foreign
grants all read as LOCKED, so failures re-prompt instead of granting access.
"""
from __future__ import annotations

from enum import Enum
import logging
from typing import Optional, Protocol

from .domain import DEFAULT_DASHBOARD_PATH
from .stores import AdminGrant

logger = logging.getLogger("symptomdx.identity_access")


class GateState(str, Enum):
    UNKNOWN = "unknown"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class GrantStore(Protocol):
    def create(self, *, sub: str) -> AdminGrant: ...

    def get(self, grant_id: str) -> Optional[AdminGrant]: ...


class AdminGate:
    """Admin access state machine for one request within a browser session.

    Parameters
    ----------
    store:
        Server-side grant store (in-memory or DB-backed).
    sub:
        Identity provider subject of the signed-in user.
    grant_id:
        Opaque value of the gate cookie, if the browser sent one.
    """

    def __init__(self, store: GrantStore, *, sub: str, grant_id: Optional[str] = None) -> None:
        self._store = store
        self._sub = sub
        self._grant_id = grant_id
        self.state = GateState.UNKNOWN
        self.modal_open = False
        self.grant: Optional[AdminGrant] = None

    @property
    def is_unlocked(self) -> bool:
        return self.state is GateState.UNLOCKED

    def check_existing_session(self) -> GateState:
        """Read the stored grant and settle the gate state (read-only)."""
        if self.state is GateState.UNLOCKED:
            return self.state
        grant = self._lookup()
        if grant is not None and grant.sub == self._sub:
            self.grant = grant
            self.state = GateState.UNLOCKED
            self.modal_open = False
        else:
            self.state = GateState.LOCKED
            self.modal_open = True
        return self.state

    def on_auth_success(self) -> AdminGrant:
        """Unlock the gate for the rest of the browser session and persist the grant."""
        grant = self._store.create(sub=self._sub)
        self.grant = grant
        self._grant_id = grant.grant_id
        self.state = GateState.UNLOCKED
        self.modal_open = False
        return grant

    def on_modal_dismiss(self) -> Optional[str]:
        """Close the modal; return where to navigate if the gate is still closed."""
        self.modal_open = False
        if self.state is GateState.UNLOCKED:
            return None
        return DEFAULT_DASHBOARD_PATH

    def _lookup(self) -> Optional[AdminGrant]:
        if not self._grant_id:
            return None
        try:
            return self._store.get(self._grant_id)
        except Exception as exc:
            logger.warning("Admin grant lookup failed: %s", exc.__class__.__name__)
            return None
