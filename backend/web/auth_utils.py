"""
Shared authentication utilities.

Why:
    Keep cookie policy and in-app redirect validation in one place so the
    main app and the admin router cannot drift apart.
"""

from __future__ import annotations

import re

# Absolute in-app paths only: no scheme, no double slashes, no traversal.
INAPP_PATH_PATTERN = re.compile(r"^(?!.*//)(?!.*\.\.)/[A-Za-z0-9._\-/]*$")
MAX_INAPP_REDIRECT_LEN = 256


def cookie_opts(environment: str) -> dict:
    """Return hardened cookie flags (dev = prod).

    Returns a mapping with keys:
      - secure: True
      - samesite: "lax"
    """
    # Lax keeps the cookie on top-level navigations back from the identity provider.
    return {"secure": True, "samesite": "lax"}


def is_inapp_path(value: str | None) -> bool:
    if not isinstance(value, str) or len(value) > MAX_INAPP_REDIRECT_LEN:
        return False
    return bool(INAPP_PATH_PATTERN.match(value))
