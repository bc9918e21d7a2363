"""
Navigation Component for SymptomDx

Role-based sidebar that adapts to the signed-in user (patient/doctor/admin).
"""

from typing import Optional, Dict, Any, List, Tuple
from .base import Component

NavItem = Tuple[str, str]

NAV_CONFIG: Dict[str, List[NavItem]] = {
    "patient": [
        ("/dashboard/patient", "Dashboard"),
    ],
    "doctor": [
        ("/dashboard/doctor", "Dashboard"),
    ],
    "admin": [
        ("/dashboard/admin", "Dashboard"),
        ("/admin/monitor", "System Monitor"),
        ("/admin/ai-models", "AI Management"),
        ("/admin/users", "User Management"),
        ("/admin/analytics", "System Analytics"),
    ],
}

ROLE_LABELS = {
    "patient": "Patient",
    "doctor": "Healthcare Professional",
    "admin": "Administrator",
}


class Navigation(Component):
    """Sidebar with role-based menu items"""

    def __init__(self, user: Optional[Dict[str, Any]] = None, current_path: str = "/"):
        """
        Args:
            user: User dict with 'role' and 'name' keys (optional)
            current_path: The current URL path for active link highlighting
        """
        self.user = user
        self.current_path = current_path

    def render(self) -> str:
        if not self.user:
            return self._render_aside([("/", "Home"), ("/sign-in", "Sign in")], footer="")

        items = self.items()
        role_label = ROLE_LABELS.get(str(self.user.get("role") or ""), "User")
        footer = f"""
            <div class="sidebar-footer">
                <div class="user-name">{self.escape(self.user.get("name", ""))}</div>
                <div class="user-role">{self.escape(role_label)}</div>
            </div>"""
        return self._render_aside(items, footer=footer)

    def items(self) -> List[NavItem]:
        """Menu for the user's role; unknown roles get an empty menu.

        Visibility alone never grants access: the admin area stays behind
        the admin gate even when its links are shown.
        """
        role = str((self.user or {}).get("role") or "").lower()
        return list(NAV_CONFIG.get(role, []))

    def active_href(self, items: List[NavItem]) -> Optional[str]:
        """Best prefix match of the current path among the menu entries."""
        path = self.current_path or "/"
        best: Optional[str] = None
        for href, _label in items:
            if href == path:
                return href
            if href != "/" and path.startswith(href + "/") and (best is None or len(href) > len(best)):
                best = href
        return best

    def _render_aside(self, items: List[NavItem], *, footer: str) -> str:
        active = self.active_href(items)
        links = "".join(self._link(href, label, href == active) for href, label in items)
        return f"""
    <aside class="sidebar" id="sidebar" aria-label="Sidebar">
        <nav class="sidebar-nav" role="navigation" aria-label="Main navigation">
            <div class="sidebar-header">
                <span class="sidebar-title">SymptomDx</span>
            </div>
            <div class="sidebar-items">
                {links}
            </div>{footer}
        </nav>
    </aside>"""

    def _link(self, href: str, label: str, is_active: bool) -> str:
        css = self.classes("sidebar-link", active=is_active)
        aria = ' aria-current="page"' if is_active else ""
        return f"""
                <a href="{self.escape(href)}" class="{css}"{aria}>
                    <span class="nav-text">{self.escape(label)}</span>
                </a>"""
