"""
Dashboard Page Components

Role dashboards and the protected admin tools. The admin sections are the
"protected children" of the admin gate: only render them behind it.
"""

from typing import Dict, NamedTuple

from ..base import Component


class AdminSection(NamedTuple):
    title: str
    description: str


ADMIN_SECTIONS: Dict[str, AdminSection] = {
    "": AdminSection("Admin Dashboard", "System overview and administrative tools"),
    "users": AdminSection("User Management", "Manage patients, doctors and administrators"),
    "doctors": AdminSection("Doctor Verification", "Review and verify healthcare professional applications"),
    "analytics": AdminSection("System Analytics", "Usage and diagnosis statistics"),
    "ai-models": AdminSection("AI Management", "Model versions, usage and cost"),
    "monitor": AdminSection("System Monitor", "Service health and background jobs"),
}


class DashboardPage(Component):
    """Landing content of a role dashboard."""

    INTROS = {
        "patient": "Start a new symptom analysis or review your previous diagnoses.",
        "doctor": "Review AI analyses and manage your patients.",
        "admin": "System overview. Administrative tools require admin verification.",
    }

    def __init__(self, role: str):
        self.role = role

    def render(self) -> str:
        links = ""
        if self.role == "admin":
            items = "".join(
                f'<li><a href="/admin/{key}">{self.escape(section.title)}</a></li>'
                for key, section in ADMIN_SECTIONS.items()
                if key
            )
            links = f'<ul class="admin-tools">{items}</ul>'
        return f"""
        <section class="dashboard" data-dashboard="{self.escape(self.role)}">
            <p>{self.escape(self.INTROS.get(self.role, ""))}</p>
            {links}
        </section>"""


class AdminSectionPage(Component):
    """Mount point for one admin tool."""

    def __init__(self, key: str):
        self.key = key
        self.section = ADMIN_SECTIONS[key]

    def render(self) -> str:
        return f"""
        <section class="admin-section" id="admin-tool" data-admin-section="{self.escape(self.key or 'overview')}">
            <p>{self.escape(self.section.description)}</p>
        </section>"""
