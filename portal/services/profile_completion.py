"""
Profile Completion Calculator

Derives how complete a student profile is from ten tracked fields.
Pure functions only: the value is recomputed on every read and never
stored, so edits show up immediately.

`is_complete` is NOT derived here. It is a separate flag set when the
student submits the profile form; we only pass it through.
"""

from typing import Any, Dict

TRACKED_FIELDS = (
    "program",
    "graduation_year",
    "cgpa",
    "skills",
    "projects",
    "resume_url",
    "github_url",
    "linkedin_url",
    "portfolio_url",
    "bio",
)


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        # 0.0 CGPA is a real value, not a blank field
        return True
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def completion_percentage(profile: Dict[str, Any]) -> int:
    """Percentage (0-100) of tracked fields that are populated."""
    if not profile:
        return 0
    filled = sum(1 for field in TRACKED_FIELDS if _is_filled(profile.get(field)))
    return round(filled / len(TRACKED_FIELDS) * 100)


def profile_state(profile: Dict[str, Any]) -> Dict[str, Any]:
    """
    Derived profile state for API responses.

    Returns:
        {"completion_percentage": int, "is_complete": bool}
    """
    return {
        "completion_percentage": completion_percentage(profile),
        "is_complete": bool((profile or {}).get("is_complete", False)),
    }
