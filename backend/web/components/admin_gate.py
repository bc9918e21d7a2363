"""
Admin gate components: the auth modal and the layout wrapper that decides
between the restricted placeholder and the protected children.
"""

from typing import Optional, Dict, Any

from identity_access.admin_gate import GateState

from .base import Component
from .layout import Layout


class AdminAuthModal(Component):
    """Password prompt for the admin area.

    Submits to POST /admin/auth; Cancel submits to POST /admin/auth/dismiss so
    the server decides where a still-locked user goes.
    """

    def __init__(self, next_path: str = "/admin", error: Optional[str] = None, open: bool = True):
        self.next_path = next_path
        self.error = error
        self.open = open

    def render(self) -> str:
        if not self.open:
            return ""
        error_html = (
            f'<div class="alert alert-error" role="alert">{self.escape(self.error)}</div>' if self.error else ""
        )
        next_value = self.escape(self.next_path)
        return f"""
<div class="modal-backdrop">
    <div class="modal" id="admin-auth-modal" role="dialog" aria-modal="true" aria-labelledby="admin-auth-title">
        <h2 id="admin-auth-title" class="modal-title">Admin Access Required</h2>
        <section class="card card-warning">
            <h3 class="card-title">Security Verification</h3>
            <p>This area contains sensitive administrative functions. Please enter the admin password to proceed.</p>
            <form method="post" action="/admin/auth" class="form">
                <input type="hidden" name="next" value="{next_value}">
                <input {self.attributes(type="password", name="password", placeholder="Enter admin password", autocomplete="current-password", required=True, class_="form-input")}>
                {error_html}
                <div class="form-actions">
                    <button type="submit" class="btn btn-danger">Access Admin Panel</button>
                </div>
            </form>
            <form method="post" action="/admin/auth/dismiss" class="form form-inline">
                <input type="hidden" name="next" value="{next_value}">
                <button type="submit" class="btn btn-outline">Cancel</button>
            </form>
        </section>
    </div>
</div>"""


RESTRICTED_PLACEHOLDER = """
<div class="restricted-access">
    <h3>Access Restricted</h3>
    <p class="text-muted">Admin authentication required to access the admin dashboard.</p>
</div>"""


class AdminGateLayout(Component):
    """Render the restricted placeholder plus modal, or the protected children.

    `children` is the fully rendered protected page and is only emitted when
    the gate is UNLOCKED.
    """

    def __init__(
        self,
        state: GateState,
        children: str,
        modal: AdminAuthModal,
        user: Optional[Dict[str, Any]] = None,
        current_path: str = "/admin",
    ):
        self.state = state
        self.children = children
        self.modal = modal
        self.user = user
        self.current_path = current_path

    def render(self) -> str:
        if self.state is GateState.UNLOCKED:
            return self.children
        return Layout(
            title="Admin Dashboard",
            description="Access restricted - authentication required",
            content=RESTRICTED_PLACEHOLDER + self.modal.render(),
            user=self.user,
            current_path=self.current_path,
        ).render()
