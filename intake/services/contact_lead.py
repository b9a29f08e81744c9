"""
Contact-lead drafts.

The contact wizard collects identity, address and project answers in steps.
These helpers validate each step and turn a finished draft into the body that
``POST /lead`` accepts (minus the Turnstile token the browser adds).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from intake.schemas.lead import MAX_ADDRESS, MAX_CITY, MAX_NAME, Email
from intake.services.normalization import (
    is_valid_state,
    is_valid_zip,
    normalize_phone_for_submit,
    normalize_preferred_contact,
    normalize_state,
    normalize_zip,
    validate_email,
)


@dataclass
class ContactIdentityDraft:
    first_name: str
    last_name: str
    email: str
    phone: str


@dataclass
class ContactAddressDraft:
    address1: str
    city: str
    state: str
    zip: str
    address2: Optional[str] = None


@dataclass
class ResourceLinkDraft:
    label: str
    href: str
    description: Optional[str] = None
    external: bool = False


@dataclass
class ContactLeadPayloadDraft:
    identity: ContactIdentityDraft
    address: ContactAddressDraft
    project_type: Optional[str] = None
    help_summary: Optional[str] = None
    timeline_label: Optional[str] = None
    notes: Optional[str] = None
    preferred_contact: Optional[str] = None
    best_time_label: Optional[str] = None
    consent_sms: bool = False
    resource_links: List[ResourceLinkDraft] = field(default_factory=list)
    page: str = "/contact-us"


_email_adapter: TypeAdapter = TypeAdapter(Email)


def _is_valid_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_contact_identity_draft(draft: ContactIdentityDraft) -> Dict[str, str]:
    """Field messages for the identity step, using the same rules ``POST /lead`` applies."""
    errors: Dict[str, str] = {}
    first_name = draft.first_name.strip()
    last_name = draft.last_name.strip()

    if not first_name:
        errors["firstName"] = "Enter your first name."
    elif len(first_name) > MAX_NAME:
        errors["firstName"] = f"Use at most {MAX_NAME} characters."
    if not last_name:
        errors["lastName"] = "Enter your last name."
    elif len(last_name) > MAX_NAME:
        errors["lastName"] = f"Use at most {MAX_NAME} characters."
    if not validate_email(draft.email) or not _is_valid_email(draft.email):
        errors["email"] = "Enter a valid email (example@gmail.com)."
    if len(normalize_phone_for_submit(draft.phone)) != 11:
        errors["phone"] = "Enter a valid 10-digit phone number"
    return errors


def validate_contact_address_draft(draft: ContactAddressDraft) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    address1 = (draft.address1 or "").strip()
    address2 = (draft.address2 or "").strip()
    city = (draft.city or "").strip()
    state_raw = draft.state or ""
    zip_raw = draft.zip or ""

    if not address1:
        errors["address1"] = "Enter your street address."
    elif len(address1) > MAX_ADDRESS:
        errors["address1"] = f"Use at most {MAX_ADDRESS} characters."
    if len(address2) > MAX_ADDRESS:
        errors["address2"] = f"Use at most {MAX_ADDRESS} characters."
    if not city:
        errors["city"] = "Enter your city."
    elif len(city) > MAX_CITY:
        errors["city"] = f"Use at most {MAX_CITY} characters."
    if not state_raw.strip():
        errors["state"] = "State is required."
    elif not is_valid_state(state_raw):
        errors["state"] = "Use the two-letter state code."
    if not zip_raw.strip():
        errors["zip"] = "ZIP is required."
    elif not is_valid_zip(zip_raw):
        errors["zip"] = "ZIP should be 5 digits."
    return errors


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def build_contact_lead_payload(draft: ContactLeadPayloadDraft) -> Dict[str, Any]:
    """Build a ``contact-lead`` body from a draft; empty optional answers are omitted."""
    identity = draft.identity
    address = draft.address

    payload: Dict[str, Any] = {
        "type": "contact-lead",
        "firstName": identity.first_name.strip(),
        "lastName": identity.last_name.strip(),
        "email": identity.email.strip(),
        "phone": normalize_phone_for_submit(identity.phone),
        "preferredContact": normalize_preferred_contact(draft.preferred_contact),
        "consentSms": bool(draft.consent_sms),
        "page": draft.page,
        "address1": address.address1.strip(),
        "city": address.city.strip(),
        "state": normalize_state(address.state),
        "zip": normalize_zip(address.zip),
    }

    optional = {
        "projectType": _optional(draft.project_type),
        "helpTopics": _optional(draft.help_summary),
        "timeline": _optional(draft.timeline_label),
        "notes": _optional(draft.notes),
        "bestTime": _optional(draft.best_time_label),
        "address2": _optional(address.address2),
    }
    payload.update({key: value for key, value in optional.items() if value is not None})

    if draft.resource_links:
        links = []
        for link in draft.resource_links:
            item: Dict[str, Any] = {"label": link.label.strip(), "href": link.href, "external": link.external}
            description = _optional(link.description)
            if description:
                item["description"] = description
            links.append(item)
        payload["resourceLinks"] = links

    return payload
