"""
Onboarding Page Components

Entry points only: the role picker and the per-role wizard mount. The
wizards themselves are client-side.
"""

from typing import List, NamedTuple

from ..base import Component


class RoleOption(NamedTuple):
    value: str
    label: str
    description: str
    features: List[str]


ROLE_OPTIONS = [
    RoleOption(
        "patient",
        "Patient",
        "Get AI-powered symptom analysis and diagnostic suggestions from the comfort of your home",
        ["Instant symptom analysis", "AI-powered diagnosis suggestions", "Health history tracking", "Secure medical records"],
    ),
    RoleOption(
        "doctor",
        "Healthcare Professional",
        "Review AI analyses, collaborate with AI for better diagnosis, and manage patient care efficiently",
        ["AI-assisted diagnosis review", "Patient management dashboard", "Clinical decision support", "Professional certification required"],
    ),
]


def _page(title: str, body_class: str, content: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - SymptomDx</title>
    <link rel="stylesheet" href="/static/css/symptomdx.css?v=1">
</head>
<body class="{body_class}">
    <main id="main-content" class="onboarding-container">
        {content}
    </main>
</body>
</html>"""


class RoleSelectionPage(Component):
    """Role picker posting the chosen role to /onboarding/role."""

    def __init__(self, error: str | None = None):
        self.error = error

    def render(self) -> str:
        cards = "".join(self._card(option) for option in ROLE_OPTIONS)
        error = f'<div class="alert alert-error" role="alert">{self.escape(self.error)}</div>' if self.error else ""
        content = f"""
        <div class="text-center">
            <h1>Welcome to SymptomDx</h1>
            <p class="text-muted">Choose your role to access personalized features and start your journey with intelligent healthcare</p>
        </div>
        {error}
        <form method="post" action="/onboarding/role" class="role-selection" data-entry-point="role-selection">
            {cards}
        </form>"""
        return _page("Onboarding", "onboarding-page", content)

    def _card(self, option: RoleOption) -> str:
        features = "".join(f"<li>{self.escape(f)}</li>" for f in option.features)
        return f"""
            <section class="card role-card">
                <h2 class="card-title">{self.escape(option.label)}</h2>
                <p>{self.escape(option.description)}</p>
                <ul>{features}</ul>
                <button type="submit" name="role" value="{self.escape(option.value)}" class="btn btn-primary">Continue as {self.escape(option.label)}</button>
            </section>"""


class OnboardingWizardPage(Component):
    """Mount point for a role-specific onboarding wizard."""

    TITLES = {
        "doctor-onboarding": "Healthcare Professional Onboarding",
        "patient-onboarding": "Patient Onboarding",
    }

    def __init__(self, entry_point: str):
        self.entry_point = entry_point

    def render(self) -> str:
        title = self.TITLES.get(self.entry_point, "Onboarding")
        content = f"""
        <h1>{self.escape(title)}</h1>
        <div {self.attributes(id="onboarding-wizard", data_entry_point=self.entry_point)}></div>"""
        return _page(title, f"onboarding-page {self.entry_point}", content)
