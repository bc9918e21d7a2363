"""
Admin gate through the HTTP surface.

Requirements:
- No grant (absent, unknown, foreign) → restricted placeholder + auth modal,
  never the protected tool.
- Valid grant → protected tool, no modal.
- After a successful credential check the next render is unlocked without a prompt.
- Dismissing the modal while locked → navigation to /dashboard, never the admin tool.
"""

import pytest
import httpx
from httpx import ASGITransport

import main  # type: ignore
from routes.admin import ADMIN_GATE_COOKIE  # type: ignore

from conftest import ADMIN_PASSWORD, SESSION_COOKIE


pytestmark = pytest.mark.anyio("asyncio")

PROTECTED_MARKER = 'id="admin-tool"'
MODAL_MARKER = 'id="admin-auth-modal"'
PLACEHOLDER_MARKER = "Access Restricted"


def _client(cookies: dict | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test", cookies=cookies or {})


def _admin_cookies(identity, sub: str = "admin-1", grant_id: str | None = None) -> dict:
    cookies = {SESSION_COOKIE: identity.issue(sub=sub, role="admin")}
    if grant_id is not None:
        cookies[ADMIN_GATE_COOKIE] = grant_id
    return cookies


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/admin", "/admin/users", "/admin/monitor"])
async def test_locked_session_renders_placeholder_and_modal(identity, path):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.get(path)
    assert r.status_code == 200
    assert PLACEHOLDER_MARKER in r.text
    assert MODAL_MARKER in r.text
    assert PROTECTED_MARKER not in r.text
    assert r.headers.get("Cache-Control") == "private, no-store"


@pytest.mark.anyio
async def test_unknown_grant_is_treated_as_locked(identity):
    async with _client(_admin_cookies(identity, grant_id="forged-or-corrupt")) as client:
        r = await client.get("/admin")
    assert MODAL_MARKER in r.text
    assert PROTECTED_MARKER not in r.text


@pytest.mark.anyio
async def test_grant_of_another_subject_is_treated_as_locked(identity, grant_store):
    foreign = grant_store.create(sub="admin-2")
    async with _client(_admin_cookies(identity, sub="admin-1", grant_id=foreign.grant_id)) as client:
        r = await client.get("/admin")
    assert MODAL_MARKER in r.text
    assert PROTECTED_MARKER not in r.text


@pytest.mark.anyio
async def test_valid_grant_renders_children_without_modal(identity, grant_store):
    grant = grant_store.create(sub="admin-1")
    async with _client(_admin_cookies(identity, grant_id=grant.grant_id)) as client:
        r = await client.get("/admin/analytics")
    assert r.status_code == 200
    assert PROTECTED_MARKER in r.text
    assert 'data-admin-section="analytics"' in r.text
    assert MODAL_MARKER not in r.text
    assert PLACEHOLDER_MARKER not in r.text


@pytest.mark.anyio
async def test_auth_success_unlocks_following_renders(identity):
    async with _client(_admin_cookies(identity)) as client:
        r_auth = await client.post(
            "/admin/auth", data={"password": ADMIN_PASSWORD, "next": "/admin/users"}, follow_redirects=False
        )
        assert r_auth.status_code == 303
        assert r_auth.headers.get("location") == "/admin/users"
        set_cookie = r_auth.headers.get("set-cookie", "")
        assert set_cookie.startswith(f"{ADMIN_GATE_COOKIE}=")
        assert "HttpOnly" in set_cookie
        assert "Max-Age" not in set_cookie and "expires" not in set_cookie.lower()

        grant_id = set_cookie.split(";", 1)[0].split("=", 1)[1]
        client.cookies.set(ADMIN_GATE_COOKIE, grant_id)
        first = await client.get("/admin/users")
        second = await client.get("/admin")
    for r in (first, second):
        assert PROTECTED_MARKER in r.text
        assert MODAL_MARKER not in r.text


@pytest.mark.anyio
async def test_wrong_password_rerenders_locked_layout_with_error(identity):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.post("/admin/auth", data={"password": "wrong-password", "next": "/admin"})
    assert r.status_code == 401
    assert "Invalid admin password." in r.text
    assert MODAL_MARKER in r.text
    assert PROTECTED_MARKER not in r.text
    assert "set-cookie" not in r.headers


@pytest.mark.anyio
async def test_short_password_is_rejected_before_comparison(identity):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.post("/admin/auth", data={"password": "abc", "next": "/admin"})
    assert r.status_code == 401
    assert "at least 6 characters" in r.text


@pytest.mark.anyio
async def test_non_admin_cannot_unlock_even_with_correct_password(identity):
    cookies = {SESSION_COOKIE: identity.issue(sub="doc-1", role="doctor")}
    async with _client(cookies) as client:
        r = await client.post("/admin/auth", data={"password": ADMIN_PASSWORD, "next": "/admin"})
    assert r.status_code == 403
    assert "Admin role required." in r.text
    assert PROTECTED_MARKER not in r.text


@pytest.mark.anyio
@pytest.mark.parametrize("next_value", ["https://evil.example/admin", "//evil.example", "/dashboard/patient", "/admin/../x", "/admin/unknown"])
async def test_auth_success_ignores_unsafe_next(identity, next_value):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.post(
            "/admin/auth", data={"password": ADMIN_PASSWORD, "next": next_value}, follow_redirects=False
        )
    assert r.status_code == 303
    assert r.headers.get("location") == "/admin"


@pytest.mark.anyio
async def test_dismiss_while_locked_navigates_to_default_dashboard(identity):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.post("/admin/auth/dismiss", data={"next": "/admin/users"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers.get("location") == "/dashboard"


@pytest.mark.anyio
async def test_dismiss_while_locked_never_reaches_admin_children(identity):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.post("/admin/auth/dismiss", data={"next": "/admin"}, follow_redirects=True)
    assert str(r.url).endswith("/dashboard/admin")
    assert PROTECTED_MARKER not in r.text


@pytest.mark.anyio
async def test_dismiss_htmx_uses_hx_redirect(identity):
    async with _client(_admin_cookies(identity)) as client:
        r = await client.post("/admin/auth/dismiss", data={"next": "/admin"}, headers={"HX-Request": "true"})
    assert r.status_code == 204
    assert r.headers.get("HX-Redirect") == "/dashboard"


@pytest.mark.anyio
async def test_dismiss_while_unlocked_only_closes_modal(identity, grant_store):
    grant = grant_store.create(sub="admin-1")
    async with _client(_admin_cookies(identity, grant_id=grant.grant_id)) as client:
        r = await client.post("/admin/auth/dismiss", data={"next": "/admin/monitor"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers.get("location") == "/admin/monitor"


@pytest.mark.anyio
async def test_unknown_admin_section_returns_404(identity, grant_store):
    grant = grant_store.create(sub="admin-1")
    async with _client(_admin_cookies(identity, grant_id=grant.grant_id)) as client:
        r = await client.get("/admin/does-not-exist")
    assert r.status_code == 404
