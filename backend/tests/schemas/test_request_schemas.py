"""Request Schemas — normalisation and cross-field rules that routes rely on.

Tests:
    - Emails lower-cased; names and titles stripped
    - Profile updates refuse password and role
    - Blank sitemap URL means "skip"; analysis needs content or url
"""

import pytest
from pydantic import ValidationError

from lamontai.schemas.article import ArticleCreate, ArticleUpdate
from lamontai.schemas.auth import RegisterRequest
from lamontai.schemas.generation import ArticleGenerationRequest, ContentAnalysisRequest
from lamontai.schemas.onboarding import SitemapRequest
from lamontai.schemas.user import AdminUserUpdate, ProfileUpdate


def test_register_lowercases_email_and_strips_name():
    req = RegisterRequest(name="  Ana ", email="Ana@Example.COM", password="secret123")
    assert req.email == "ana@example.com"
    assert req.name == "Ana"


def test_profile_update_rejects_password_and_role():
    with pytest.raises(ValidationError, match="/api/v1/users/password"):
        ProfileUpdate.model_validate({"password": "hunter22"})
    with pytest.raises(ValidationError, match="own role"):
        ProfileUpdate.model_validate({"role": "admin"})


def test_admin_update_accepts_role_but_not_password():
    assert AdminUserUpdate(role="editor").role.value == "editor"
    with pytest.raises(ValidationError):
        AdminUserUpdate.model_validate({"password": "hunter22"})


def test_article_keywords_are_cleaned():
    article = ArticleCreate(
        title="  Title ", content="x" * 50, keywords=[" coffee ", "", "beans"],
    )
    assert article.title == "Title"
    assert article.keywords == ["coffee", "beans"]


def test_article_update_leaves_unset_fields_out():
    update = ArticleUpdate(status="published")
    assert update.model_dump(exclude_unset=True) == {"status": "published"}


def test_generation_request_defaults():
    req = ArticleGenerationRequest(topic=" coffee ", keywords=["beans"])
    assert req.topic == "coffee"
    assert req.length.value == "medium"
    assert req.include_internal_links is True
    assert req.save is False


def test_blank_sitemap_url_is_none():
    assert SitemapRequest(sitemap_url="  ").sitemap_url is None
    assert SitemapRequest(sitemap_url="https://ex.com/sitemap.xml").sitemap_url == (
        "https://ex.com/sitemap.xml"
    )


def test_analysis_needs_content_or_url():
    with pytest.raises(ValidationError, match="content or url"):
        ContentAnalysisRequest(content="   ", keywords=["seo"])
    assert ContentAnalysisRequest(url="https://ex.com/page").url == "https://ex.com/page"
