"""
Onboarding and dashboard routes.

Both areas branch on the role carried in the URL. The branching itself is
done by the identity domain resolvers; handlers only turn a `Redirect` into
a response and a `Mount` into a page.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from components import Layout
from components.pages import DashboardPage, OnboardingWizardPage, RoleSelectionPage
from identity_access.domain import (
    Redirect,
    Role,
    SELF_SERVICE_ROLES,
    dashboard_path,
    resolve_dashboard,
    resolve_onboarding,
    route_role,
)

onboarding_router = APIRouter(tags=["Onboarding"])

DASHBOARD_TITLES = {
    Role.PATIENT: "Patient Dashboard",
    Role.DOCTOR: "Doctor Dashboard",
    Role.ADMIN: "Admin Dashboard",
}


def _user_role(request: Request) -> Role | None:
    return Role.parse(request.state.user.get("role"))


def _render_onboarding(request: Request) -> HTMLResponse | RedirectResponse:
    decision = resolve_onboarding(route_role(request.url.path))
    if isinstance(decision, Redirect):
        return RedirectResponse(url=decision.location, status_code=302)
    user = request.state.user
    if user.get("onboarding_complete"):
        return RedirectResponse(url=dashboard_path(_user_role(request)), status_code=302)
    if decision.entry_point == "role-selection":
        return HTMLResponse(RoleSelectionPage().render())
    return HTMLResponse(OnboardingWizardPage(decision.entry_point).render())


@onboarding_router.get("/onboarding", response_class=HTMLResponse)
async def onboarding_index(request: Request):
    return _render_onboarding(request)


@onboarding_router.get("/onboarding/admin")
async def onboarding_admin(request: Request):
    """Admins never onboard; always forwarded to the admin dashboard."""
    return _render_onboarding(request)


@onboarding_router.get("/onboarding/doctor", response_class=HTMLResponse)
async def onboarding_doctor(request: Request):
    return _render_onboarding(request)


@onboarding_router.get("/onboarding/patient", response_class=HTMLResponse)
async def onboarding_patient(request: Request):
    return _render_onboarding(request)


@onboarding_router.post("/onboarding/role")
async def onboarding_choose_role(request: Request):
    form = await request.form()
    role = Role.parse(form.get("role"))
    if role not in SELF_SERVICE_ROLES:
        return HTMLResponse(RoleSelectionPage(error="Please choose a valid role.").render(), status_code=400)
    return RedirectResponse(url=f"/onboarding/{role.value}", status_code=303)


@onboarding_router.get("/dashboard")
async def dashboard_index(request: Request):
    return RedirectResponse(url=dashboard_path(_user_role(request)), status_code=302)


@onboarding_router.get("/dashboard/{role}", response_class=HTMLResponse)
async def dashboard_for_role(request: Request, role: str):
    requested = Role.parse(role)
    if requested is None or requested.value != role:
        raise HTTPException(status_code=404, detail="not_found")
    decision = resolve_dashboard(requested, _user_role(request))
    if isinstance(decision, Redirect):
        return RedirectResponse(url=decision.location, status_code=302)
    html = Layout(
        title=DASHBOARD_TITLES[requested],
        content=DashboardPage(requested.value).render(),
        user=request.state.user,
        current_path=request.url.path,
    ).render()
    return HTMLResponse(html)
