"""Schema validation for raw lead bodies.

Every parse function returns a ``ValidationResult`` instead of raising, with
all field issues collected under dotted paths (``match.reasons.3``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from intake.core.config import LEAD_TYPES
from intake.core.exceptions import ClientInputError, FieldErrors
from intake.schemas.feedback import LegacyFeedback
from intake.schemas.lead import (
    ContactLead,
    FeedbackLead,
    FinancingLead,
    LeadSubmission,
    SpecialOfferLead,
)

T = TypeVar("T")

AnyLead = Union[FinancingLead, FeedbackLead, SpecialOfferLead, ContactLead]

VALIDATION_FAILED = "Validation failed"

_lead_adapter: TypeAdapter = TypeAdapter(LeadSubmission)

_TAG_MESSAGES = {
    "union_tag_not_found": "Lead type is required",
    "union_tag_invalid": "Unknown lead type",
}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    lead: Optional[T] = None
    error: Optional[ClientInputError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> int:
        return self.error.status_code if self.error else 200

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def field_errors(self) -> Optional[FieldErrors]:
        return self.error.field_errors if self.error else None


def collect_field_errors(exc: PydanticValidationError, strip_tag: bool = False) -> FieldErrors:
    """Group every pydantic issue by dotted field path, preserving order."""
    field_errors: FieldErrors = {}
    for issue in exc.errors():
        loc = list(issue.get("loc", ()))
        err_type = issue.get("type", "")

        if err_type in _TAG_MESSAGES:
            key = "type"
            message = _TAG_MESSAGES[err_type]
        else:
            if strip_tag and loc and loc[0] in LEAD_TYPES:
                loc = loc[1:]
            key = ".".join(str(part) for part in loc) or "_"
            message = issue.get("msg", "Invalid value")

        field_errors.setdefault(key, []).append(message)
    return field_errors


def _failure(field_errors: FieldErrors) -> ValidationResult:
    return ValidationResult(error=ClientInputError(VALIDATION_FAILED, field_errors=field_errors))


def parse_lead(raw: Any) -> ValidationResult[AnyLead]:
    """Validate a raw JSON value as one of the lead variants, chosen by ``type``."""
    try:
        lead = _lead_adapter.validate_python(raw)
    except PydanticValidationError as exc:
        return _failure(collect_field_errors(exc, strip_tag=True))
    return ValidationResult(lead=lead)


def parse_legacy_feedback(raw: Any) -> ValidationResult[LegacyFeedback]:
    try:
        lead = LegacyFeedback.model_validate(raw)
    except PydanticValidationError as exc:
        return _failure(collect_field_errors(exc))
    return ValidationResult(lead=lead)
