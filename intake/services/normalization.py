from __future__ import annotations

import math
import re
from typing import Optional

_NON_DIGIT = re.compile(r"\D")
_STATE_PATTERN = re.compile(r"^[A-Z]{2}$")
_ZIP_PATTERN = re.compile(r"^\d{5}$")
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PAGE_URL_PATTERN = re.compile(r"^(https?:)?//", re.IGNORECASE)

# Suffixes accepted by the financing calculator form.
FINANCING_EMAIL_SUFFIXES = (".com", ".net", ".org", ".edu", ".gov", ".co", ".us", ".io", ".info", ".biz")

PREFERRED_CONTACT_VALUES = ("phone-call", "email")
DEFAULT_PREFERRED_CONTACT = "phone-call"


def strip_to_digits(value: Optional[str], max_digits: Optional[int] = None) -> str:
    if not value:
        return ""
    digits = _NON_DIGIT.sub("", value)
    if max_digits is not None:
        return digits[:max_digits]
    return digits


def strip_to_phone_digits(value: Optional[str]) -> str:
    """Digits as typed, capped at 11 with a leading country code or 10 without."""
    digits = strip_to_digits(value)
    if not digits:
        return ""
    if digits.startswith("1"):
        return digits[:11]
    return digits[:10]


def is_us_phone_complete(value: Optional[str]) -> bool:
    digits = strip_to_phone_digits(value)
    if len(digits) == 11 and digits.startswith("1"):
        return True
    return len(digits) == 10


def normalize_phone_for_submit(value: Optional[str]) -> str:
    """
    Normalize a US phone number to ``1`` + 10 digits.

    Returns an empty string when the input cannot resolve to ten significant
    digits. Callers treat anything other than an 11-digit result as invalid.
    """
    digits = strip_to_digits(value)
    if not digits:
        return ""
    if digits.startswith("1"):
        return digits[:11]
    if len(digits) >= 10:
        return f"1{digits[-10:]}"
    return ""


def format_phone_us(value: Optional[str]) -> str:
    """Human display form, ``(941) 555-1234``. Unresolvable input is returned as given."""
    normalized = normalize_phone_for_submit(value)
    if len(normalized) != 11:
        return value or ""
    core = normalized[1:]
    return f"({core[:3]}) {core[3:6]}-{core[6:]}"


def format_phone_for_display(value: Optional[str]) -> str:
    """Progressive display form used while a number is still being typed."""
    digits = strip_to_phone_digits(value)
    if not digits:
        return ""
    has_country_code = digits.startswith("1")
    local = digits[1:] if has_country_code else digits
    prefix = "+1 " if has_country_code or len(local) == 10 else ""

    if len(local) <= 3:
        return f"{prefix}({local}"
    if len(local) <= 6:
        return f"{prefix}({local[:3]}) {local[3:]}"
    last = local[6:10]
    return f"{prefix}({local[:3]}) {local[3:6]}{'-' + last if last else ''}"


def clean_loose_phone(value: str) -> str:
    """Keep digits and common formatting characters, collapse whitespace."""
    cleaned = re.sub(r"[^0-9+()\-\s]", "", value)
    return re.sub(r"\s+", " ", cleaned).strip()


def looks_like_phone(value: str) -> bool:
    digits = strip_to_digits(value)
    return len(digits) == 0 or len(digits) >= 7


def normalize_state(value: Optional[str]) -> str:
    return (value or "").strip().upper()


def is_valid_state(value: Optional[str]) -> bool:
    return bool(_STATE_PATTERN.match(normalize_state(value)))


def normalize_zip(value: Optional[str]) -> str:
    return strip_to_digits(value)


def is_valid_zip(value: Optional[str]) -> bool:
    return bool(_ZIP_PATTERN.match(normalize_zip(value)))


def validate_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return bool(_EMAIL_PATTERN.match(email.strip().lower()))


def has_financing_email_suffix(email: str) -> bool:
    return email.strip().lower().endswith(FINANCING_EMAIL_SUFFIXES)


def is_page_reference(value: str) -> bool:
    """A site path (``/tell-us-why``) or an absolute/protocol-relative URL."""
    return value == "" or value.startswith("/") or bool(_PAGE_URL_PATTERN.match(value))


def normalize_preferred_contact(value: Optional[str]) -> str:
    return "email" if value == "email" else DEFAULT_PREFERRED_CONTACT


def round_half_up(amount: float) -> int:
    return int(math.floor(amount + 0.5))


def format_usd(amount: float) -> str:
    """Whole-dollar currency string, ``$15,000``."""
    rounded = round_half_up(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}"
