"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ArticleId, ContentPlanId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - PLAN_ARTICLE_LIMITS covers every Plan member

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ArticleId = NewType("ArticleId", UUID)
ContentPlanId = NewType("ContentPlanId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles — editor and admin unlock privileged routes."""
    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"


class Plan(str, Enum):
    """Billing plans — each caps the number of generated articles."""
    FREE = "free"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ContentType(str, Enum):
    BLOG = "blog"
    SOCIAL = "social"
    EMAIL = "email"
    PRODUCT = "product"


class ArticleStatus(str, Enum):
    """Article lifecycle — published_at is stamped on first transition to PUBLISHED."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ContentPlanStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ArticleLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class InterfaceLanguage(str, Enum):
    ENGLISH = "english"
    SPANISH = "spanish"
    FRENCH = "french"
    GERMAN = "german"


class SearchIntent(str, Enum):
    INFORMATIONAL = "informational"
    TRANSACTIONAL = "transactional"
    NAVIGATIONAL = "navigational"
    COMMERCIAL = "commercial"


class GenerationKind(str, Enum):
    """What a ContentGeneration row recorded."""
    ARTICLE = "article"
    KEYWORDS = "keywords"
    ANALYSIS = "analysis"


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(str, Enum):
    """UserSubscription lifecycle — only ACTIVE rows grant a paid plan."""
    ACTIVE = "active"
    CANCELED = "canceled"
    EXPIRED = "expired"
    PENDING = "pending"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_CREDITS = 100

PLAN_ARTICLE_LIMITS: dict[Plan, int] = {
    Plan.FREE: 5,
    Plan.STARTER: 25,
    Plan.PROFESSIONAL: 100,
    Plan.ENTERPRISE: 9999,
}

ARTICLE_WORD_RANGES: dict[ArticleLength, str] = {
    ArticleLength.SHORT: "800-1000",
    ArticleLength.MEDIUM: "1500-2000",
    ArticleLength.LONG: "2500-3000",
}

DEFAULT_SEARCH_INTENT: dict[str, int] = {
    SearchIntent.INFORMATIONAL.value: 60,
    SearchIntent.TRANSACTIONAL.value: 20,
    SearchIntent.NAVIGATIONAL.value: 10,
    SearchIntent.COMMERCIAL.value: 10,
}


def plan_article_limit(plan: str) -> int:
    """Article allowance for a plan name. Unknown plans get the free allowance."""
    try:
        return PLAN_ARTICLE_LIMITS[Plan(plan)]
    except ValueError:
        return PLAN_ARTICLE_LIMITS[Plan.FREE]
