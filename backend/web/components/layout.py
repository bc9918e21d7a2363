"""
Layout Component for SymptomDx

Main layout wrapper that combines navigation and page content into a
complete HTML document.
"""

from typing import Optional, Dict, Any
from .base import Component
from .navigation import Navigation


class Layout(Component):
    """Main layout component that assembles the complete page"""

    def __init__(
        self,
        title: str,
        content: str,
        user: Optional[Dict[str, Any]] = None,
        show_nav: bool = True,
        current_path: str = "/",
        description: Optional[str] = None,
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            user: Current user object (optional)
            show_nav: Whether to show the sidebar (default: True)
            current_path: Current URL path for active navigation highlighting
            description: Optional subtitle rendered under the page heading
        """
        self.title = title
        self.content = content
        self.user = user
        self.show_nav = show_nav
        self.current_path = current_path
        self.description = description

    def render(self) -> str:
        nav_html = Navigation(self.user, self.current_path).render() if self.show_nav else ""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    {self._render_head()}
</head>
<body>
    <a href="#main-content" class="skip-link">Skip to main content</a>

    {nav_html}

    <main id="main-content" class="main-content" role="main">
        {self._render_page_header()}
        {self.content}
        <footer class="content-footer" role="contentinfo">
            <p class="text-center text-muted">SymptomDx &middot; AI-assisted symptom analysis</p>
        </footer>
    </main>
</body>
</html>"""

    def _render_head(self) -> str:
        return f"""
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="SymptomDx - AI-assisted symptom analysis">
    <title>{self.escape(self.title)} - SymptomDx</title>
    <link rel="stylesheet" href="/static/css/symptomdx.css?v=1">
    """

    def _render_page_header(self) -> str:
        if not self.show_nav:
            return ""
        subtitle = f'<p class="page-description">{self.escape(self.description)}</p>' if self.description else ""
        return f"""
        <header class="page-header">
            <h1>{self.escape(self.title)}</h1>
            {subtitle}
        </header>"""
