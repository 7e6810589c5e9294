"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; every other entity except the SubscriptionPlan
      catalogue is scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from lamontai.models.user import User  # noqa: F401
from lamontai.models.user_settings import UserSettings  # noqa: F401
from lamontai.models.article import Article  # noqa: F401
from lamontai.models.content_plan import ContentPlan  # noqa: F401
from lamontai.models.content_generation import ContentGeneration  # noqa: F401
from lamontai.models.subscription import SubscriptionPlan, UserSubscription  # noqa: F401
