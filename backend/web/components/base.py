"""
Base Component Class for SymptomDx UI Components

Pages are assembled from small Python classes that render HTML strings.
Escaping lives here so every component gets it for free.
"""

from typing import Optional, Any
import html


class Component:
    """Base class for all server-rendered UI components"""

    def render(self) -> str:
        """Render the component as an HTML string"""
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[str]) -> str:
        """Escape HTML entities; None renders as an empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Build a CSS class string from fixed and conditional classes

        Example:
            >>> Component.classes("btn", "btn-danger", disabled=True, active=False)
            "btn btn-danger disabled"
        """
        classes = list(args)
        classes.extend(key for key, value in conditionals.items() if value)
        return " ".join(classes)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Build HTML attributes from keyword arguments

        Trailing underscores map reserved words (`class_` -> `class`), inner
        underscores become hyphens (`data_next` -> `data-next`). True renders a
        boolean attribute, False/None drop the attribute.

        Example:
            >>> Component.attributes(id="modal", aria_modal="true", hidden=False)
            'id="modal" aria-modal="true"'
        """
        result = []
        for key, value in attrs.items():
            if key.endswith("_"):
                key = key[:-1]
            else:
                key = key.replace("_", "-")

            if value is True:
                result.append(key)
            elif value is not False and value is not None:
                result.append(f'{key}="{html.escape(str(value))}"')

        return " ".join(result)
