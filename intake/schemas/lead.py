# intake/schemas/lead.py
"""
Lead submission models.

A submission is exactly one of four variants selected by its ``type`` field.
Every variant shares the base envelope (Turnstile token, honeypot, page and
UTM tracking). Field names follow the JSON the site sends (camelCase), the
Python attributes are snake_case.
"""
from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from typing_extensions import Annotated

from intake.services.normalization import (
    FINANCING_EMAIL_SUFFIXES,
    has_financing_email_suffix,
    is_page_reference,
    normalize_phone_for_submit,
    normalize_state,
    normalize_zip,
)

MAX_NAME = 100
MAX_EMAIL = 254
MAX_PHONE = 32
MAX_ADDRESS = 200
MAX_CITY = 100
MAX_PAGE = 2083
MAX_UTM = 200
MAX_TOKEN = 2000


def _trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _email(value: Any) -> Any:
    value = _trim(value)
    if isinstance(value, str) and len(value) > MAX_EMAIL:
        raise PydanticCustomError("email_too_long", "Email must be at most {max} characters", {"max": MAX_EMAIL})
    return value


def _us_phone(value: Any) -> str:
    if not isinstance(value, str):
        raise PydanticCustomError("phone_type", "Phone must be a string")
    value = value.strip()
    if len(value) > MAX_PHONE:
        raise PydanticCustomError("phone_too_long", "Phone must be at most {max} characters", {"max": MAX_PHONE})
    normalized = normalize_phone_for_submit(value)
    if len(normalized) != 11:
        raise PydanticCustomError("phone_invalid", "Enter a valid 10-digit phone number")
    return normalized


def _state(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("state_required", "State is required.")
    normalized = normalize_state(value)
    if len(normalized) != 2 or not normalized.isalpha() or not normalized.isascii():
        raise PydanticCustomError("state_invalid", "Use the two-letter state code.")
    return normalized


def _zip(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("zip_required", "ZIP is required.")
    if len(value) > 10:
        raise PydanticCustomError("zip_invalid", "ZIP should be 5 digits.")
    normalized = normalize_zip(value)
    if len(normalized) != 5:
        raise PydanticCustomError("zip_invalid", "ZIP should be 5 digits.")
    return normalized


def _page(value: Any) -> Any:
    value = _trim(value)
    if isinstance(value, str) and not is_page_reference(value):
        raise PydanticCustomError("page_invalid", "Expected a path or URL")
    return value


def _rating(value: Any) -> Any:
    # "1" | "2" | "3" arrive from form selects; numbers from JSON clients.
    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            return int(value)
    return value


Email = Annotated[EmailStr, BeforeValidator(_email)]
UsPhone = Annotated[str, BeforeValidator(_us_phone)]
StateCode = Annotated[str, BeforeValidator(_state)]
ZipCode = Annotated[str, BeforeValidator(_zip)]
PagePath = Annotated[str, BeforeValidator(_page), Field(max_length=MAX_PAGE)]
Rating = Annotated[Literal[1, 2, 3], BeforeValidator(_rating)]


class LeadModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class LeadEnvelope(LeadModel):
    cf_token: str = Field(min_length=10, max_length=MAX_TOKEN)
    hp_field: Optional[str] = Field(default=None, alias="hp_field", max_length=MAX_TOKEN)
    page: Optional[PagePath] = None
    utm_source: Optional[str] = Field(default=None, alias="utm_source", max_length=MAX_UTM)
    utm_medium: Optional[str] = Field(default=None, alias="utm_medium", max_length=MAX_UTM)
    utm_campaign: Optional[str] = Field(default=None, alias="utm_campaign", max_length=MAX_UTM)

    @field_validator("cf_token", mode="before")
    def require_token(cls, v):
        if v is None or (isinstance(v, str) and len(v.strip()) < 10):
            raise PydanticCustomError("token_missing", "Turnstile token missing")
        return v


class IdentityMixin(LeadModel):
    first_name: str = Field(min_length=1, max_length=MAX_NAME)
    last_name: str = Field(min_length=1, max_length=MAX_NAME)
    email: Email
    phone: UsPhone

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class AddressMixin(LeadModel):
    address1: str = Field(min_length=1, max_length=MAX_ADDRESS)
    address2: Optional[str] = Field(default=None, max_length=MAX_ADDRESS)
    city: str = Field(min_length=1, max_length=MAX_CITY)
    state: StateCode
    zip: ZipCode


class QuizAnswer(LeadModel):
    id: str = Field(min_length=1, max_length=100)
    question: str = Field(max_length=500)
    answer: Optional[str] = Field(default=None, max_length=500)
    answer_value: Optional[str] = Field(default=None, max_length=500)
    answer_label: Optional[str] = Field(default=None, max_length=500)


class ProgramScores(LeadModel):
    ygrene_score: float = Field(ge=0, le=100)
    service_finance_score: float = Field(ge=0, le=100)
    is_uncertain: bool


class ProgramMatch(LeadModel):
    program: Literal["serviceFinance", "ygrene"]
    score: float = Field(ge=0, le=100)
    reasons: List[Annotated[str, Field(max_length=300)]] = Field(default_factory=list, max_length=3)


class FinancingLead(IdentityMixin, AddressMixin, LeadEnvelope):
    type: Literal["financing-calculator"]
    amount: float = Field(ge=1000, le=10_000_000)
    quiz_summary: Optional[List[QuizAnswer]] = Field(default=None, max_length=20)
    scores: Optional[ProgramScores] = None
    match: Optional[ProgramMatch] = None

    @field_validator("email")
    def restrict_email_suffix(cls, v):
        if not has_financing_email_suffix(v):
            raise PydanticCustomError(
                "email_suffix",
                "Use an email ending in one of: {suffixes}",
                {"suffixes": ", ".join(FINANCING_EMAIL_SUFFIXES)},
            )
        return v


class FeedbackLead(IdentityMixin, LeadEnvelope):
    type: Literal["feedback"]
    rating: Rating
    message: str = Field(min_length=1, max_length=5000)
    ua: Optional[str] = Field(default=None, max_length=1024)
    tz: Optional[str] = Field(default=None, max_length=100)


class SpecialOfferLead(IdentityMixin, LeadEnvelope):
    type: Literal["special-offer"]
    offer_code: str = Field(min_length=1, max_length=100)
    offer_slug: str = Field(min_length=1, max_length=100)
    offer_title: Optional[str] = Field(default=None, max_length=200)
    offer_expiration: Optional[str] = Field(default=None, max_length=100)
    message: Optional[str] = Field(default=None, max_length=1000)


class ResourceLink(LeadModel):
    label: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    href: PagePath
    external: bool = False


class ContactLead(IdentityMixin, AddressMixin, LeadEnvelope):
    type: Literal["contact-lead"]
    project_type: str = Field(min_length=1, max_length=100)
    help_topics: Optional[str] = Field(default=None, max_length=1000)
    timeline: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=5000)
    preferred_contact: Literal["phone-call", "email"] = "phone-call"
    best_time: Optional[str] = Field(default=None, max_length=200)
    consent_sms: bool = False
    resource_links: Optional[List[ResourceLink]] = Field(default=None, max_length=20)


LeadSubmission = Annotated[
    Union[FinancingLead, FeedbackLead, SpecialOfferLead, ContactLead],
    Field(discriminator="type"),
]
