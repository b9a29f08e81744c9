from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence
from urllib.parse import urlsplit

from intake.core.exceptions import ForbiddenOriginError

PREFLIGHT_MAX_AGE = 600

_DEFAULT_PORTS = {"http": 80, "https": 443}


def resolve_request_origin(headers: Mapping[str, str]) -> Optional[str]:
    """The ``Origin`` header, else the origin part of ``Referer``, else None."""
    origin = headers.get("origin")
    if origin:
        return origin

    referer = headers.get("referer")
    if not referer:
        return None
    try:
        parts = urlsplit(referer)
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None

    scheme = parts.scheme.lower()
    host = parts.hostname
    if ":" in host:
        # IPv6 literal; urlsplit drops the brackets.
        host = f"[{host}]"
    origin = f"{scheme}://{host}"
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        origin = f"{origin}:{port}"
    return origin


def check_origin(headers: Mapping[str, str], allowed: Sequence[str]) -> Optional[ForbiddenOriginError]:
    """
    Return an error when the request comes from a known origin outside the
    allowlist. An empty allowlist or an unknown origin passes.
    """
    if not allowed:
        return None
    origin = resolve_request_origin(headers)
    if origin and origin not in allowed:
        return ForbiddenOriginError()
    return None


def preflight_headers(headers: Mapping[str, str], allowed: Sequence[str]) -> Dict[str, str]:
    origin = resolve_request_origin(headers)
    if origin and origin in allowed:
        allow_origin = origin
    elif allowed:
        allow_origin = allowed[0]
    else:
        allow_origin = "*"

    return {
        "access-control-allow-origin": allow_origin,
        "access-control-allow-methods": "POST, OPTIONS",
        "access-control-allow-headers": "content-type",
        "access-control-max-age": str(PREFLIGHT_MAX_AGE),
    }


def resolve_client_ip(headers: Mapping[str, str]) -> Optional[str]:
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or None
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    cf_ip = headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()
    return None
