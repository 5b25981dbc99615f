"""Shared enums for models."""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> frozenset[str]:
        return frozenset(member.value for member in cls)  # type: ignore[attr-defined]


class IdeaStatus(str, Enum):
    """Visibility status of an idea, driven by the supervision workflow."""

    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    PUBLIC = "public"


class RequestStatus(str, Enum):
    """Status of a supervision request."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class Decision(str, Enum):
    """Supervisor's answer to a request."""

    ACCEPT = "accept"
    REJECT = "reject"


class IdeaCategory(_ValuesMixin, str, Enum):
    TECHNOLOGY = "Technology"
    EDUCATION = "Education"
    HEALTHCARE = "Healthcare"
    ENVIRONMENT = "Environment"
    INNOVATION = "Innovation"
    AI = "AI"
    MOBILE = "Mobile"
    WEB = "Web"
    SOCIAL_IMPACT = "Social Impact"
    BUSINESS = "Business"
    DESIGN = "Design"
    SCIENCE = "Science"


class BusinessModel(_ValuesMixin, str, Enum):
    SAAS = "SaaS (Subscription)"
    E_COMMERCE = "E-commerce"
    MARKETPLACE = "Marketplace"
    AD_SUPPORTED = "Ad-Supported"
    HARDWARE_SALE = "Hardware Sale"
    FREEMIUM = "Freemium"
    SERVICE_BASED = "Service-Based"
    NOT_SURE_YET = "Not Sure Yet"
    OTHER = "Other"
