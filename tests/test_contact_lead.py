import pytest

from conftest import TOKEN
from intake.schemas.lead import ContactLead
from intake.services.contact_lead import (
    ContactAddressDraft,
    ContactIdentityDraft,
    ContactLeadPayloadDraft,
    ResourceLinkDraft,
    build_contact_lead_payload,
    validate_contact_address_draft,
    validate_contact_identity_draft,
)
from intake.services.validation import parse_lead


def make_draft(**overrides):
    fields = dict(
        identity=ContactIdentityDraft(first_name=" Lee ", last_name="Park", email="lee@gmail.com", phone="(941) 555-9999"),
        address=ContactAddressDraft(address1="9 Gulf Dr", city="Venice", state="fl", zip="34285"),
        project_type="roof-replacement",
    )
    fields.update(overrides)
    return ContactLeadPayloadDraft(**fields)


def test_identity_draft_validation():
    assert validate_contact_identity_draft(make_draft().identity) == {}

    errors = validate_contact_identity_draft(
        ContactIdentityDraft(first_name=" ", last_name="", email="lee@", phone="941-555")
    )
    assert set(errors) == {"firstName", "lastName", "email", "phone"}
    assert errors["phone"] == "Enter a valid 10-digit phone number"


def test_address_draft_validation():
    assert validate_contact_address_draft(make_draft().address) == {}

    errors = validate_contact_address_draft(ContactAddressDraft(address1="", city="", state="", zip=""))
    assert errors == {
        "address1": "Enter your street address.",
        "city": "Enter your city.",
        "state": "State is required.",
        "zip": "ZIP is required.",
    }

    errors = validate_contact_address_draft(ContactAddressDraft(address1="1 A St", city="X", state="Fla", zip="123"))
    assert errors == {"state": "Use the two-letter state code.", "zip": "ZIP should be 5 digits."}


def test_payload_normalized_and_sparse():
    payload = build_contact_lead_payload(make_draft(notes="   ", preferred_contact="sms"))

    assert payload["type"] == "contact-lead"
    assert payload["firstName"] == "Lee"
    assert payload["phone"] == "19415559999"
    assert payload["state"] == "FL"
    assert payload["preferredContact"] == "phone-call"
    assert payload["page"] == "/contact-us"
    assert payload["consentSms"] is False
    for key in ("notes", "helpTopics", "timeline", "bestTime", "address2", "resourceLinks", "cfToken", "hp_field"):
        assert key not in payload


def test_payload_keeps_answers_and_links():
    draft = make_draft(
        help_summary="Leak over kitchen",
        timeline_label="Within 30 days",
        best_time_label="Mornings",
        preferred_contact="email",
        consent_sms=True,
        resource_links=[
            ResourceLinkDraft(label="Roof guide", href="/guides/roof"),
            ResourceLinkDraft(label="Insurance", href="https://example.org/ins", description="Claims help", external=True),
        ],
    )
    payload = build_contact_lead_payload(draft)

    assert payload["helpTopics"] == "Leak over kitchen"
    assert payload["timeline"] == "Within 30 days"
    assert payload["bestTime"] == "Mornings"
    assert payload["preferredContact"] == "email"
    assert payload["consentSms"] is True
    assert payload["resourceLinks"] == [
        {"label": "Roof guide", "href": "/guides/roof", "external": False},
        {"label": "Insurance", "href": "https://example.org/ins", "external": True, "description": "Claims help"},
    ]


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"notes": "Please call after 5", "preferred_contact": "email"},
        {"address": ContactAddressDraft(address1="1 Main", address2="Unit 4", city="Nokomis", state=" fl ", zip="34275")},
        {"identity": ContactIdentityDraft(first_name="A", last_name="B", email="ab@web.de", phone="+1 941 555 0101")},
        {"resource_links": [ResourceLinkDraft(label="Guide", href="//cdn.example.net/g.pdf", external=True)]},
        {"page": "https://sonshineroofing.com/contact-us"},
    ],
)
def test_built_payload_revalidates(overrides):
    payload = build_contact_lead_payload(make_draft(**overrides))
    payload["cfToken"] = TOKEN

    result = parse_lead(payload)
    assert result.ok, result.field_errors
    assert isinstance(result.lead, ContactLead)


@pytest.mark.parametrize(
    "identity,field",
    [
        (ContactIdentityDraft(first_name="Lee", last_name="Park", email="lee@gmail.com", phone="123-456-7890"), "phone"),
        (ContactIdentityDraft(first_name="Lee", last_name="Park", email="lee@example.test", phone="9415559999"), "email"),
        (ContactIdentityDraft(first_name="Lee", last_name="Park", email="lee..x@gmail.com", phone="9415559999"), "email"),
        (ContactIdentityDraft(first_name="L" * 150, last_name="Park", email="lee@gmail.com", phone="9415559999"), "firstName"),
        (ContactIdentityDraft(first_name="Lee", last_name="P" * 101, email="lee@gmail.com", phone="9415559999"), "lastName"),
    ],
)
def test_identity_draft_applies_submission_rules(identity, field):
    errors = validate_contact_identity_draft(identity)
    assert list(errors) == [field]

    payload = build_contact_lead_payload(make_draft(identity=identity))
    payload["cfToken"] = TOKEN
    assert field in parse_lead(payload).field_errors


def test_address_draft_length_bounds():
    errors = validate_contact_address_draft(
        ContactAddressDraft(address1="A" * 201, address2="B" * 201, city="C" * 101, state="FL", zip="34285")
    )
    assert set(errors) == {"address1", "address2", "city"}


@pytest.mark.parametrize(
    "identity,address",
    [
        (
            ContactIdentityDraft(first_name="L" * 100, last_name=" Park ", email=" lee@gmail.com ", phone="1 (941) 555-9999"),
            ContactAddressDraft(address1="A" * 200, city="C" * 100, state="fl", zip="34285"),
        ),
        (
            ContactIdentityDraft(first_name="Lee", last_name="Park", email="lee.x+roof@web.de", phone="0019415559999"),
            ContactAddressDraft(address1="9 Gulf Dr", address2="  ", city="Venice", state=" Fl", zip="34285"),
        ),
    ],
)
def test_drafts_passing_step_validators_revalidate(identity, address):
    assert validate_contact_identity_draft(identity) == {}
    assert validate_contact_address_draft(address) == {}

    payload = build_contact_lead_payload(make_draft(identity=identity, address=address))
    payload["cfToken"] = TOKEN
    result = parse_lead(payload)
    assert result.ok, result.field_errors
