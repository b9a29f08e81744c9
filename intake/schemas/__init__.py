# intake/schemas/__init__.py
"""
Pydantic schemas for request validation and response serialization.
"""

from intake.schemas.feedback import LegacyFeedback
from intake.schemas.lead import (
    ContactLead,
    FeedbackLead,
    FinancingLead,
    LeadSubmission,
    SpecialOfferLead,
)
from intake.schemas.responses import LeadResponse

__all__ = [
    "ContactLead",
    "FeedbackLead",
    "FinancingLead",
    "LeadResponse",
    "LeadSubmission",
    "LegacyFeedback",
    "SpecialOfferLead",
]
