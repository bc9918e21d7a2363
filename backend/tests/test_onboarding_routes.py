"""
Onboarding and dashboard routing.

Requirements:
- /onboarding/admin always redirects to /dashboard/admin, whatever the user state.
- /onboarding/doctor and /onboarding/patient mount their wizard entry point.
- /onboarding mounts the role selection; POST /onboarding/role forwards to the role route.
- Completed onboarding skips the wizards; /dashboard/<other role> redirects to the own dashboard.
"""

import pytest
import httpx
from httpx import ASGITransport

import main  # type: ignore

from conftest import SESSION_COOKIE


pytestmark = pytest.mark.anyio("asyncio")


def _client(identity, *, role: str | None, onboarding_complete: bool, sub: str = "user-1") -> httpx.AsyncClient:
    token = identity.issue(sub=sub, role=role, onboarding_complete=onboarding_complete)
    return httpx.AsyncClient(
        transport=ASGITransport(app=main.app), base_url="http://test", cookies={SESSION_COOKIE: token}
    )


@pytest.mark.anyio
@pytest.mark.parametrize(
    "role,onboarding_complete",
    [("admin", True), ("admin", False), ("doctor", False), ("patient", True), (None, False)],
)
async def test_admin_onboarding_always_redirects_to_admin_dashboard(identity, role, onboarding_complete):
    async with _client(identity, role=role, onboarding_complete=onboarding_complete) as client:
        r = await client.get("/onboarding/admin", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers.get("location") == "/dashboard/admin"


@pytest.mark.anyio
async def test_admin_onboarding_requires_sign_in():
    async with httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test") as client:
        r = await client.get("/onboarding/admin", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers.get("location") == "/sign-in?redirect_url=/onboarding/admin"


@pytest.mark.anyio
@pytest.mark.parametrize("role", ["doctor", "patient"])
async def test_role_onboarding_mounts_wizard(identity, role):
    async with _client(identity, role=None, onboarding_complete=False) as client:
        r = await client.get(f"/onboarding/{role}")
    assert r.status_code == 200
    assert f'data-entry-point="{role}-onboarding"' in r.text


@pytest.mark.anyio
async def test_generic_onboarding_mounts_role_selection(identity):
    async with _client(identity, role=None, onboarding_complete=False) as client:
        r = await client.get("/onboarding")
    assert r.status_code == 200
    assert 'data-entry-point="role-selection"' in r.text
    assert 'action="/onboarding/role"' in r.text
    assert 'value="patient"' in r.text and 'value="doctor"' in r.text
    assert 'value="admin"' not in r.text


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/onboarding", "/onboarding/doctor"])
async def test_completed_onboarding_skips_to_own_dashboard(identity, path):
    async with _client(identity, role="doctor", onboarding_complete=True) as client:
        r = await client.get(path, follow_redirects=False)
    assert r.status_code == 302
    assert r.headers.get("location") == "/dashboard/doctor"


@pytest.mark.anyio
@pytest.mark.parametrize("role", ["doctor", "patient"])
async def test_role_choice_redirects_to_role_onboarding(identity, role):
    async with _client(identity, role=None, onboarding_complete=False) as client:
        r = await client.post("/onboarding/role", data={"role": role}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers.get("location") == f"/onboarding/{role}"


@pytest.mark.anyio
@pytest.mark.parametrize("role", ["admin", "nurse", ""])
async def test_role_choice_rejects_non_self_service_roles(identity, role):
    async with _client(identity, role=None, onboarding_complete=False) as client:
        r = await client.post("/onboarding/role", data={"role": role}, follow_redirects=False)
    assert r.status_code == 400
    assert "Please choose a valid role." in r.text


@pytest.mark.anyio
async def test_incomplete_onboarding_is_sent_to_onboarding(identity):
    async with _client(identity, role="patient", onboarding_complete=False) as client:
        r = await client.get("/dashboard/patient", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers.get("location") == "/onboarding"


@pytest.mark.anyio
@pytest.mark.parametrize("role", ["patient", "doctor", "admin"])
async def test_dashboard_index_redirects_to_own_dashboard(identity, role):
    async with _client(identity, role=role, onboarding_complete=True) as client:
        r = await client.get("/dashboard", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers.get("location") == f"/dashboard/{role}"


@pytest.mark.anyio
async def test_foreign_dashboard_redirects_to_own(identity):
    async with _client(identity, role="patient", onboarding_complete=True) as client:
        r = await client.get("/dashboard/admin", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers.get("location") == "/dashboard/patient"


@pytest.mark.anyio
async def test_own_dashboard_renders(identity):
    async with _client(identity, role="doctor", onboarding_complete=True) as client:
        r = await client.get("/dashboard/doctor")
    assert r.status_code == 200
    assert "Doctor Dashboard" in r.text
    assert 'data-dashboard="doctor"' in r.text


@pytest.mark.anyio
async def test_unknown_dashboard_role_returns_404(identity):
    async with _client(identity, role="doctor", onboarding_complete=True) as client:
        r = await client.get("/dashboard/nurse")
    assert r.status_code == 404


@pytest.mark.anyio
@pytest.mark.parametrize("role,path", [("admin", "/dashboard/admin"), ("patient", "/dashboard/patient"), (None, "/dashboard/patient")])
async def test_matching_dashboard_mounts_role_page(identity, role, path):
    async with _client(identity, role=role, onboarding_complete=True) as client:
        r = await client.get(path, follow_redirects=False)
    assert r.status_code == 200
    assert f'data-dashboard="{path.rsplit("/", 1)[1]}"' in r.text
