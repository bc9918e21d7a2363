"""
Page Components for SymptomDx

Each page component renders the main content of one route; routes wrap it
in `Layout` (or render it standalone for the sign-in and onboarding flows).
"""

from .landing import LandingPage
from .sign_in import SignInPage
from .onboarding import RoleSelectionPage, OnboardingWizardPage
from .dashboards import DashboardPage, AdminSectionPage, ADMIN_SECTIONS

__all__ = [
    "ADMIN_SECTIONS",
    "AdminSectionPage",
    "DashboardPage",
    "LandingPage",
    "OnboardingWizardPage",
    "RoleSelectionPage",
    "SignInPage",
]
