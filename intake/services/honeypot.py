from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

# Hidden form inputs a person never fills in.
HONEYPOT_FIELDS = ("company", "website", "fax", "hp_field")


def tripped_field(body: Mapping[str, Any], field_names: Sequence[str] = HONEYPOT_FIELDS) -> Optional[str]:
    """Return the first trap field carrying non-blank text, if any."""
    for name in field_names:
        value = body.get(name)
        if isinstance(value, str) and value.strip():
            return name
    return None


def is_honeypot_tripped(body: Any, field_names: Sequence[str] = HONEYPOT_FIELDS) -> bool:
    if not isinstance(body, Mapping):
        return False
    return tripped_field(body, field_names) is not None
