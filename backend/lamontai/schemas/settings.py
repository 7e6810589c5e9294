"""Settings Schemas — interface preferences and the combined settings view."""

from pydantic import BaseModel, ConfigDict

from lamontai.core.domain_types import InterfaceLanguage, Theme


class SettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    theme: str = Theme.LIGHT.value
    language: str = InterfaceLanguage.ENGLISH.value
    notifications: bool = True
    website_url: str | None = None
    business_description: str | None = None
    target_audiences: list[str] = []
    competitors: list[dict] = []
    sitemap_url: str | None = None
    target_languages: list[str] = []
    audience_size: str | None = None
    sitemap_url_count: int | None = None


class SettingsUpdate(BaseModel):
    theme: Theme | None = None
    language: InterfaceLanguage | None = None
    notifications: bool | None = None
