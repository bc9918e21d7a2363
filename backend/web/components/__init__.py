# SymptomDx Component System
# Pure Python Components for type-safe HTML generation

from .base import Component
from .layout import Layout
from .navigation import Navigation
from .admin_gate import AdminAuthModal, AdminGateLayout

__all__ = [
    "AdminAuthModal",
    "AdminGateLayout",
    "Component",
    "Layout",
    "Navigation",
]
