"""
Identity domain constants and the route resolver.

Why:
- Centralize roles and dashboard paths to avoid drift between middleware,
  route handlers and tools.
- Role-based branching (onboarding, dashboards) goes through a single
  resolver that returns a tagged result instead of ad-hoc checks per route.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: object) -> Optional["Role"]:
        """Return the Role for a raw claim/form value, or None if unknown."""
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Immutable to prevent accidental mutation.
ALLOWED_ROLES = frozenset(r.value for r in Role)

DEFAULT_DASHBOARD_PATH = "/dashboard"
ADMIN_DASHBOARD_PATH = "/dashboard/admin"
ONBOARDING_PATH = "/onboarding"

# Roles a user may pick during self-service onboarding. Admins are provisioned.
SELF_SERVICE_ROLES = (Role.PATIENT, Role.DOCTOR)


@dataclass(frozen=True)
class Redirect:
    location: str


@dataclass(frozen=True)
class Mount:
    entry_point: str


RouteDecision = Union[Redirect, Mount]


def dashboard_path(role: Optional[Role]) -> str:
    """Dashboard for a role; users without a known role land on the patient one."""
    return f"/dashboard/{(role or Role.PATIENT).value}"


def route_role(path: str) -> Optional[Role]:
    """Infer the role addressed by an onboarding or dashboard URL.

    `/onboarding/doctor` -> DOCTOR, `/dashboard/admin` -> ADMIN, `/onboarding` -> None.
    Paths outside these areas never carry a role.
    """
    parts = [p for p in (path or "").split("/") if p]
    if len(parts) < 2 or parts[0] not in ("onboarding", "dashboard"):
        return None
    return Role.parse(parts[1])


def resolve_onboarding(role: Optional[Role]) -> RouteDecision:
    """Map an onboarding route role to a redirect or a wizard entry point.

    Admins skip onboarding entirely.
    """
    if role is Role.ADMIN:
        return Redirect(ADMIN_DASHBOARD_PATH)
    if role is Role.DOCTOR:
        return Mount("doctor-onboarding")
    if role is Role.PATIENT:
        return Mount("patient-onboarding")
    return Mount("role-selection")


def resolve_dashboard(requested: Role, actual: Optional[Role]) -> RouteDecision:
    """Send users to their own dashboard when they request another role's one."""
    own = actual or Role.PATIENT
    if requested is not own:
        return Redirect(dashboard_path(own))
    return Mount(f"{own.value}-dashboard")


__all__ = [
    "ADMIN_DASHBOARD_PATH",
    "ALLOWED_ROLES",
    "DEFAULT_DASHBOARD_PATH",
    "Mount",
    "ONBOARDING_PATH",
    "Redirect",
    "Role",
    "RouteDecision",
    "SELF_SERVICE_ROLES",
    "dashboard_path",
    "resolve_dashboard",
    "resolve_onboarding",
    "route_role",
]
