# intake/schemas/feedback.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BeforeValidator, Field
from pydantic_core import PydanticCustomError
from typing_extensions import Annotated

from intake.schemas.lead import MAX_PHONE, MAX_TOKEN, Email, LeadModel, PagePath, Rating
from intake.services.normalization import clean_loose_phone, looks_like_phone


def _loose_phone(value: Any) -> Any:
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    value = value.strip()
    if len(value) > MAX_PHONE:
        raise PydanticCustomError("phone_too_long", "Phone must be at most {max} characters", {"max": MAX_PHONE})
    cleaned = clean_loose_phone(value) if value else ""
    if not looks_like_phone(cleaned):
        raise PydanticCustomError("phone_invalid", "Invalid phone")
    return cleaned


LoosePhone = Annotated[str, BeforeValidator(_loose_phone)]


class LegacyFeedback(LeadModel):
    """Body accepted by the single-type ``/feedback`` endpoint."""

    name: str = Field(min_length=1, max_length=200)
    email: Email
    phone: LoosePhone = ""
    rating: Rating
    message: str = Field(min_length=1, max_length=5000)
    cf_token: str = Field(min_length=10, max_length=MAX_TOKEN)
    page: Optional[PagePath] = None
    ua: Optional[str] = Field(default=None, max_length=1024)
    tz: Optional[str] = Field(default=None, max_length=100)
    hp_field: Optional[str] = Field(default=None, alias="hp_field", max_length=MAX_TOKEN)
