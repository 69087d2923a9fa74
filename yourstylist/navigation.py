"""Route guard deciding where a visitor should be sent for a given page."""

from typing import Optional

SIGN_IN_PATH = "/auth/signin"
DASHBOARD_PATH = "/dashboard"
ONBOARDING_PATH = "/onboarding"

PROTECTED_PATHS = ("/dashboard", "/onboarding")
AUTH_PATHS = ("/auth/signin", "/auth/signup")


def is_protected_path(path: str) -> bool:
    return any(path.startswith(p) for p in PROTECTED_PATHS)


def is_auth_path(path: str) -> bool:
    return any(path.startswith(p) for p in AUTH_PATHS)


def resolve_redirect(
    path: str, authenticated: bool, has_profile: bool = False
) -> Optional[str]:
    """Return the path to redirect to, or None if the page may be shown"""
    if not authenticated:
        return SIGN_IN_PATH if is_protected_path(path) else None

    if is_auth_path(path):
        return DASHBOARD_PATH

    # Signed in but never onboarded
    if not has_profile and not path.startswith("/auth") and not path.startswith(
        ONBOARDING_PATH
    ):
        return ONBOARDING_PATH

    return None


def sign_in_redirect_url(path: str) -> str:
    return f"{SIGN_IN_PATH}?redirect={path}"
