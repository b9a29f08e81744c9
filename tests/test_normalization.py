import pytest

from intake.services.normalization import (
    format_phone_for_display,
    format_phone_us,
    format_usd,
    has_financing_email_suffix,
    is_page_reference,
    is_us_phone_complete,
    is_valid_state,
    is_valid_zip,
    looks_like_phone,
    normalize_phone_for_submit,
    normalize_preferred_contact,
    normalize_state,
    normalize_zip,
    strip_to_digits,
    strip_to_phone_digits,
    validate_email,
)


def test_strip_to_digits():
    assert strip_to_digits("(941) 555-1234") == "9415551234"
    assert strip_to_digits("abc") == ""
    assert strip_to_digits(None) == ""
    assert strip_to_digits("12345678", max_digits=5) == "12345"


def test_strip_to_phone_digits_caps_length():
    assert strip_to_phone_digits("1 (941) 555-1234 ext 99") == "19415551234"
    assert strip_to_phone_digits("941 555 1234 99") == "9415551234"
    assert strip_to_phone_digits("") == ""


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("(941) 555-1234", "19415551234"),
        ("941.555.1234", "19415551234"),
        ("+1 941 555 1234", "19415551234"),
        ("19415551234", "19415551234"),
        ("00 941 555 1234", "19415551234"),
        ("555-1234", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_phone_for_submit(raw, expected):
    assert normalize_phone_for_submit(raw) == expected


def test_short_number_with_leading_one_is_not_padded():
    # Callers reject anything that is not 11 digits.
    assert normalize_phone_for_submit("1941555") == "1941555"


def test_is_us_phone_complete():
    assert is_us_phone_complete("941-555-1234")
    assert is_us_phone_complete("+1 941-555-1234")
    assert not is_us_phone_complete("941-555-123")


def test_format_phone_us():
    assert format_phone_us("19415551234") == "(941) 555-1234"
    assert format_phone_us("941.555.1234") == "(941) 555-1234"
    assert format_phone_us("12") == "12"


def test_format_phone_for_display_is_progressive():
    assert format_phone_for_display("94") == "(94"
    assert format_phone_for_display("94155") == "(941) 55"
    assert format_phone_for_display("9415551") == "(941) 555-1"
    assert format_phone_for_display("9415551234") == "+1 (941) 555-1234"
    assert format_phone_for_display("19415551234") == "+1 (941) 555-1234"
    assert format_phone_for_display("") == ""


def test_state_and_zip():
    assert normalize_state(" fl ") == "FL"
    assert is_valid_state("fl")
    assert not is_valid_state("Florida")
    assert not is_valid_state("")

    assert normalize_zip("34236-1234") == "342361234"
    assert is_valid_zip("34236")
    assert not is_valid_zip("1234")
    assert not is_valid_zip("34236-1234")


def test_validate_email():
    assert validate_email("jane@gmail.com")
    assert validate_email("  Jane@Gmail.COM ")
    assert not validate_email("jane@gmail")
    assert not validate_email("jane gmail.com")
    assert not validate_email(None)


def test_financing_email_suffix():
    assert has_financing_email_suffix("jane@gmail.com")
    assert has_financing_email_suffix("jane@city.GOV")
    assert has_financing_email_suffix("jane@startup.io")
    assert not has_financing_email_suffix("jane@web.de")
    assert not has_financing_email_suffix("jane@shop.store")


def test_is_page_reference():
    assert is_page_reference("/tell-us-why")
    assert is_page_reference("https://sonshineroofing.com/financing")
    assert is_page_reference("//cdn.example.net/x")
    assert is_page_reference("")
    assert not is_page_reference("javascript:alert(1)")
    assert not is_page_reference("financing")


def test_looks_like_phone():
    assert looks_like_phone("")
    assert looks_like_phone("555-1234")
    assert not looks_like_phone("555-12")


def test_normalize_preferred_contact():
    assert normalize_preferred_contact("email") == "email"
    assert normalize_preferred_contact("text") == "phone-call"
    assert normalize_preferred_contact(None) == "phone-call"


def test_format_usd():
    assert format_usd(15000) == "$15,000"
    assert format_usd(1234.5) == "$1,235"
    assert format_usd(999.49) == "$999"
