"""
Sign-in Page Component

Mounts the identity provider's hosted sign-in widget. Everything here is
cosmetic configuration; credentials never touch this application.
"""

import json
from typing import Dict, Optional

from ..base import Component

DEFAULT_APPEARANCE: Dict[str, Dict[str, str]] = {
    "elements": {
        "formButtonPrimary": "bg-blue-600 hover:bg-blue-700",
        "card": "shadow-lg",
    }
}


class SignInPage(Component):
    """Full standalone page wrapping the identity widget mount point."""

    def __init__(
        self,
        frontend_api_url: Optional[str],
        redirect_url: Optional[str] = None,
        appearance: Optional[Dict[str, Dict[str, str]]] = None,
        publishable_key: Optional[str] = None,
    ):
        self.frontend_api_url = (frontend_api_url or "").rstrip("/")
        self.publishable_key = publishable_key
        self.redirect_url = redirect_url
        self.appearance = appearance or DEFAULT_APPEARANCE

    def render(self) -> str:
        script = ""
        if self.frontend_api_url:
            loader = self.attributes(
                src=f"{self.frontend_api_url}/npm/@clerk/clerk-js@5/dist/clerk.browser.js",
                data_clerk_publishable_key=self.publishable_key,
                async_=True,
                crossorigin="anonymous",
            )
            # sign_in.js waits for the loader, then mounts the widget into #sign-in.
            script = f"<script {loader}></script>\n    <script src=\"/static/js/sign_in.js?v=1\" defer></script>"
        mount = self.attributes(
            id="sign-in",
            class_="identity-widget",
            data_appearance=json.dumps(self.appearance, sort_keys=True),
            data_redirect_url=self.redirect_url,
        )
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Sign in - SymptomDx</title>
    <link rel="stylesheet" href="/static/css/symptomdx.css?v=1">
    {script}
</head>
<body class="auth-page">
    <main id="main-content" class="auth-container">
        <div class="text-center">
            <h1>Welcome back</h1>
            <p class="text-muted">Sign in to access SymptomDx</p>
        </div>
        <div {mount}></div>
    </main>
</body>
</html>"""
