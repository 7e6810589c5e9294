"""Onboarding Status — pure computation of a user's onboarding progress.

Invariants:
    - onboarded is True iff website_url AND business_description are set
    - completed_steps preserves ONBOARDING_STEPS order
    - next_step is the first incomplete step, None when every step is done

Design Decisions:
    - Accepts any settings-like object (ORM row or None): no coupling to the model
"""

from typing import Protocol

ONBOARDING_STEPS = (
    "website_url",
    "business_description",
    "competitors",
    "sitemap",
    "target_audience",
)


class SettingsLike(Protocol):
    """Structural contract for the onboarding fields of UserSettings."""
    website_url: str | None
    business_description: str | None
    competitors: list | None
    sitemap_url: str | None
    target_languages: list | None
    audience_size: str | None


def _step_done(settings: SettingsLike, step: str) -> bool:
    if step == "website_url":
        return bool(settings.website_url)
    if step == "business_description":
        return bool(settings.business_description)
    if step == "competitors":
        return bool(settings.competitors)
    if step == "sitemap":
        return bool(settings.sitemap_url)
    if step == "target_audience":
        return bool(settings.target_languages) and bool(settings.audience_size)
    raise ValueError(f"Unknown onboarding step: {step}")


def onboarding_status(settings: SettingsLike | None) -> dict:
    """Onboarding progress for a user's settings. Pure, no IO."""
    if settings is None:
        return {
            "onboarded": False,
            "completed_steps": [],
            "next_step": ONBOARDING_STEPS[0],
        }
    completed = [s for s in ONBOARDING_STEPS if _step_done(settings, s)]
    remaining = [s for s in ONBOARDING_STEPS if s not in completed]
    return {
        "onboarded": bool(settings.website_url and settings.business_description),
        "completed_steps": completed,
        "next_step": remaining[0] if remaining else None,
    }
