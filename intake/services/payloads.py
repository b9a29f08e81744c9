"""Upstream payloads, one builder per lead type.

Builders copy fields explicitly, so the Turnstile token and honeypot never
reach the CRM.
"""
from __future__ import annotations

from typing import Any, Dict, Union

from intake.schemas.feedback import LegacyFeedback
from intake.schemas.lead import (
    ContactLead,
    FeedbackLead,
    FinancingLead,
    LeadEnvelope,
    SpecialOfferLead,
)
from intake.services.normalization import format_phone_us, format_usd

Payload = Dict[str, Any]

PROGRAM_LABELS = {
    "serviceFinance": "Service Finance",
    "ygrene": "YGrene PACE",
}


def _whole(amount: float) -> Union[int, float]:
    return int(amount) if float(amount).is_integer() else amount


def attach_tracking(target: Payload, lead: LeadEnvelope) -> Payload:
    if lead.page:
        target["page"] = lead.page
    if lead.utm_source:
        target["utm_source"] = lead.utm_source
    if lead.utm_medium:
        target["utm_medium"] = lead.utm_medium
    if lead.utm_campaign:
        target["utm_campaign"] = lead.utm_campaign
    return target


def _identity(lead: Union[FinancingLead, FeedbackLead, SpecialOfferLead, ContactLead]) -> Payload:
    return {
        "type": lead.type,
        "name": lead.full_name,
        "firstName": lead.first_name,
        "lastName": lead.last_name,
        "email": lead.email,
        "phone": lead.phone,
        "phoneDisplay": format_phone_us(lead.phone),
    }


def build_financing_payload(lead: FinancingLead) -> Payload:
    amount = format_usd(lead.amount)
    message = (
        f"Financing calculator unlock request from {lead.full_name} for "
        f"{lead.address1}, {lead.city}, {lead.state} {lead.zip}. "
        f"Estimated project total: {amount}."
    )
    quiz_summary = [
        {
            "id": item.id,
            "question": item.question,
            "answerLabel": item.answer_label,
            "answerValue": item.answer_value,
            "answer": item.answer,
        }
        for item in (lead.quiz_summary or [])
    ]

    payload = _identity(lead)
    payload.update(
        {
            "address1": lead.address1,
            "address2": lead.address2 or "",
            "city": lead.city,
            "state": lead.state,
            "zip": lead.zip,
            "amount": _whole(lead.amount),
            "page": lead.page or "/financing",
            "message": message,
            "quizSummary": quiz_summary,
        }
    )
    attach_tracking(payload, lead)

    if lead.scores:
        payload["scores"] = lead.scores.model_dump(by_alias=True)
    elif lead.match:
        payload["match"] = {
            "program": lead.match.program,
            "label": PROGRAM_LABELS.get(lead.match.program, lead.match.program),
            "score": _whole(lead.match.score),
            "reasons": list(lead.match.reasons),
        }
    return payload


def build_feedback_payload(lead: FeedbackLead) -> Payload:
    payload = _identity(lead)
    payload.update(
        {
            "rating": str(lead.rating),
            "message": lead.message,
            "page": lead.page or "/tell-us-why",
            "ua": lead.ua or "",
            "tz": lead.tz or "",
        }
    )
    return attach_tracking(payload, lead)


def build_special_offer_payload(lead: SpecialOfferLead) -> Payload:
    lines = [
        f"Special offer claim from {lead.full_name}.",
        f"Offer code: {lead.offer_code}",
        f"Offer slug: {lead.offer_slug}",
    ]
    if lead.offer_title:
        lines.append(f"Offer title: {lead.offer_title}")
    if lead.message:
        lines.extend(["", lead.message])

    payload = _identity(lead)
    payload.update(
        {
            "offerCode": lead.offer_code,
            "offerSlug": lead.offer_slug,
            "message": "\n".join(lines),
            "page": lead.page or f"/special-offers/{lead.offer_slug}",
        }
    )
    if lead.offer_title:
        payload["offerTitle"] = lead.offer_title
    if lead.offer_expiration:
        payload["offerExpiration"] = lead.offer_expiration
    return attach_tracking(payload, lead)


def build_contact_payload(lead: ContactLead) -> Payload:
    payload = _identity(lead)
    payload.update(
        {
            "projectType": lead.project_type,
            "helpTopics": lead.help_topics or "",
            "timeline": lead.timeline or "",
            "notes": lead.notes or "",
            "preferredContact": lead.preferred_contact,
            "bestTime": lead.best_time or "",
            "consentSms": bool(lead.consent_sms),
            "address1": lead.address1,
            "address2": lead.address2 or "",
            "city": lead.city,
            "state": lead.state,
            "zip": lead.zip,
            "page": lead.page or "/contact-us",
            "resourceLinks": [
                {
                    "label": link.label,
                    "description": link.description or "",
                    "href": link.href,
                    "external": bool(link.external),
                }
                for link in (lead.resource_links or [])
            ],
        }
    )
    return attach_tracking(payload, lead)


def build_legacy_feedback_payload(lead: LegacyFeedback) -> Payload:
    return {
        "name": lead.name,
        "email": lead.email,
        "phone": lead.phone or "",
        "rating": str(lead.rating),
        "message": lead.message,
        "page": lead.page or "/tell-us-why",
        "ua": lead.ua or "",
        "tz": lead.tz or "",
    }


def build_payload(lead: Union[FinancingLead, FeedbackLead, SpecialOfferLead, ContactLead]) -> Payload:
    if isinstance(lead, FinancingLead):
        return build_financing_payload(lead)
    if isinstance(lead, FeedbackLead):
        return build_feedback_payload(lead)
    if isinstance(lead, SpecialOfferLead):
        return build_special_offer_payload(lead)
    if isinstance(lead, ContactLead):
        return build_contact_payload(lead)
    raise TypeError(f"No payload builder for {type(lead).__name__}")
