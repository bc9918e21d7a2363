"""Public landing page."""

from ..base import Component


class LandingPage(Component):
    def __init__(self, signed_in: bool = False):
        self.signed_in = signed_in

    def render(self) -> str:
        cta = (
            '<a class="btn btn-primary" href="/dashboard">Go to dashboard</a>'
            if self.signed_in
            else '<a class="btn btn-primary" href="/sign-in">Sign in</a>'
        )
        return f"""
        <section class="hero">
            <p class="text-lg">AI-assisted symptom analysis, reviewed by healthcare professionals.</p>
            {cta}
        </section>"""
