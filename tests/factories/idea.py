"""Idea and supervision request factories."""

from polyfactory import Use

from src.sparkhub.models import (
    BusinessModel,
    Idea,
    IdeaCategory,
    IdeaStatus,
    RequestStatus,
    SupervisionRequest,
)
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class IdeaFactory(BaseFactory):
    """Factory for generating Idea test data."""

    __model__ = Idea

    id = Use(generate_uuid)
    owner_id = Use(generate_uuid)
    status = IdeaStatus.DRAFT.value
    supervisor_id = None
    title = "Campus Food Swap"
    description = "Share leftover meals between dorms."
    category = IdeaCategory.SOCIAL_IMPACT.value
    problem_statement = "Food is wasted every evening."
    solution = "A pickup board for leftovers."
    target_market = "Students in dorms"
    business_model = BusinessModel.FREEMIUM.value
    images = Use(list)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def public(cls, supervisor_id, **kwargs):
        return cls.build(status=IdeaStatus.PUBLIC.value, supervisor_id=supervisor_id, **kwargs)


class SupervisionRequestFactory(BaseFactory):
    """Factory for generating SupervisionRequest test data. Ids must be set."""

    __model__ = SupervisionRequest

    id = Use(generate_uuid)
    idea_id = None
    owner_id = None
    supervisor_id = None
    status = RequestStatus.PENDING.value
    message = None
    response_message = None
    created_at = Use(utc_now)
    decided_at = None
