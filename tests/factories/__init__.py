"""Polyfactory-based test data factories."""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.idea import IdeaFactory, SupervisionRequestFactory
from tests.factories.user import UserFactory

__all__ = [
    "BaseFactory",
    "IdeaFactory",
    "SupervisionRequestFactory",
    "UserFactory",
    "generate_uuid",
    "utc_now",
]
