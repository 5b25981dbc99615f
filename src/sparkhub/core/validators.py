"""Validation rules for idea content and request notes.

The coordinator runs these before anything is persisted, so the limits hold
no matter which entry point (API, script, test) calls it.
"""

import re
from collections.abc import Mapping
from typing import Any

from src.sparkhub.core.exceptions import FieldValidationError
from src.sparkhub.models.enums import BusinessModel, IdeaCategory

# Required free-text fields and their maximum lengths
IDEA_TEXT_LIMITS: dict[str, int] = {
    "title": 100,
    "description": 500,
    "problem_statement": 1000,
    "solution": 1000,
    "target_market": 500,
}

IDEA_CONTENT_FIELDS = frozenset({*IDEA_TEXT_LIMITS, "category", "business_model", "images"})

MAX_IMAGES = 10
MAX_NOTE_LENGTH = 500

_IMAGE_URL_RE = re.compile(r"^https?://\S+$")


def validate_idea_content(fields: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Validate and normalize idea content fields.

    Args:
        fields: Raw field values keyed by attribute name.
        partial: If True (edits), only the supplied fields are checked and
            required fields may be omitted.

    Returns:
        The cleaned values (strings trimmed, defaults applied for creation).

    Raises:
        FieldValidationError: With one message per offending field.
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    unknown = set(fields) - IDEA_CONTENT_FIELDS
    for name in sorted(unknown):
        errors[name] = "Unknown or read-only field"

    for name, limit in IDEA_TEXT_LIMITS.items():
        if name not in fields:
            if not partial:
                errors[name] = "This field is required"
            continue
        value = fields[name]
        if not isinstance(value, str) or not value.strip():
            errors[name] = "This field cannot be empty"
            continue
        value = value.strip()
        if len(value) > limit:
            errors[name] = f"Must be at most {limit} characters"
            continue
        cleaned[name] = value

    if "category" in fields:
        category = fields["category"]
        if category not in IdeaCategory.values():
            errors["category"] = "Please select a valid category"
        else:
            cleaned["category"] = category
    elif not partial:
        errors["category"] = "Please select a primary category"

    if "business_model" in fields:
        model = fields["business_model"]
        if model not in BusinessModel.values():
            errors["business_model"] = "Please select a valid business model"
        else:
            cleaned["business_model"] = model
    elif not partial:
        cleaned["business_model"] = BusinessModel.NOT_SURE_YET.value

    if "images" in fields:
        images = fields["images"] or []
        if not isinstance(images, list | tuple):
            errors["images"] = "Must be a list of image URLs"
        elif len(images) > MAX_IMAGES:
            errors["images"] = f"At most {MAX_IMAGES} images are allowed"
        elif not all(isinstance(url, str) and _IMAGE_URL_RE.match(url) for url in images):
            errors["images"] = "Invalid image URL"
        else:
            cleaned["images"] = list(images)
    elif not partial:
        cleaned["images"] = []

    if errors:
        raise FieldValidationError(errors=errors)
    return cleaned


def validate_note(value: str | None, field_name: str) -> str | None:
    """Trim an optional note; blank notes become None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > MAX_NOTE_LENGTH:
        raise FieldValidationError(
            errors={field_name: f"Must be at most {MAX_NOTE_LENGTH} characters"}
        )
    return value
