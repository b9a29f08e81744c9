# intake/core/config.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LEAD_TYPES: Tuple[str, ...] = (
    "financing-calculator",
    "feedback",
    "special-offer",
    "contact-lead",
)

DEFAULT_SITE_URL = "https://sonshineroofing.com"
TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


@dataclass(frozen=True)
class ForwardTarget:
    url: str
    secret: str
    source: str

    def masked(self) -> str:
        return f"{self.url} (secret: {'*' * 8}, via {self.source})"


class GatewayConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Environment
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    # Origin allowlist (comma-separated, empty = permissive)
    allowed_origin: str = Field(default="", validation_alias="ALLOWED_ORIGIN")

    # Bot verification
    turnstile_secret_key: Optional[str] = Field(default=None, validation_alias="TURNSTILE_SECRET_KEY")
    turnstile_verify_url: str = Field(default=TURNSTILE_VERIFY_URL, validation_alias="TURNSTILE_VERIFY_URL")

    # Upstream delivery
    lead_endpoint_url: Optional[str] = Field(default=None, validation_alias="LEAD_ENDPOINT_URL")
    lead_forward_secret: Optional[str] = Field(default=None, validation_alias="LEAD_FORWARD_SECRET")
    financing_lead_endpoint_url: Optional[str] = Field(default=None, validation_alias="FINANCING_LEAD_ENDPOINT_URL")
    financing_lead_forward_secret: Optional[str] = Field(default=None, validation_alias="FINANCING_LEAD_FORWARD_SECRET")
    feedback_endpoint_url: Optional[str] = Field(default=None, validation_alias="FEEDBACK_ENDPOINT_URL")
    feedback_forward_secret: Optional[str] = Field(default=None, validation_alias="FEEDBACK_FORWARD_SECRET")
    special_offer_endpoint_url: Optional[str] = Field(default=None, validation_alias="SPECIAL_OFFER_ENDPOINT_URL")
    special_offer_forward_secret: Optional[str] = Field(default=None, validation_alias="SPECIAL_OFFER_FORWARD_SECRET")
    upstream_timeout_seconds: float = Field(default=7.0, gt=0, validation_alias="UPSTREAM_TIMEOUT_SECONDS")
    site_url: str = Field(default=DEFAULT_SITE_URL, validation_alias="NEXT_PUBLIC_SITE_URL")

    # Monitoring
    sentry_dsn: Optional[str] = Field(default=None, validation_alias="SENTRY_DSN")
    metrics_enabled: bool = Field(default=True, validation_alias="METRICS_ENABLED")

    @field_validator("environment")
    def validate_environment(cls, v):
        valid_envs = ["development", "testing", "staging", "production"]
        if v not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v

    @field_validator("log_level")
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    def validate_log_format(cls, v):
        valid_formats = ["json", "console"]
        if v not in valid_formats:
            raise ValueError(f"log_format must be one of {valid_formats}")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    def origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origin.split(",") if origin.strip()]

    def _pair(self, url_field: str, secret_field: str) -> Optional[ForwardTarget]:
        url = getattr(self, url_field)
        secret = getattr(self, secret_field)
        if url and secret:
            return ForwardTarget(url=url, secret=secret, source=url_field.upper())
        return None

    def shared_target(self) -> Optional[ForwardTarget]:
        return self._pair("lead_endpoint_url", "lead_forward_secret")

    def feedback_target(self) -> Optional[ForwardTarget]:
        return self._pair("feedback_endpoint_url", "feedback_forward_secret")

    def resolve_forward_target(self, lead_type: str, use_shared: bool = True) -> Optional[ForwardTarget]:
        """
        Resolve where a lead of ``lead_type`` is delivered.

        The shared LEAD_* pair always wins when both halves are set, even if a
        type-specific pair is configured too. Without it, each type falls back
        to its own pair; special offers additionally fall back to the feedback
        endpoint and contact leads have no fallback at all. ``use_shared=False``
        skips the shared pair (the legacy feedback endpoint).
        """
        shared = self.shared_target() if use_shared else None
        if shared:
            return shared

        if lead_type == "financing-calculator":
            return self._pair("financing_lead_endpoint_url", "financing_lead_forward_secret")
        if lead_type == "feedback":
            return self.feedback_target()
        if lead_type == "special-offer":
            return (
                self._pair("special_offer_endpoint_url", "special_offer_forward_secret")
                or self.feedback_target()
            )
        return None

    def forward_settings_for(self, lead_type: str, use_shared: bool = True) -> List[str]:
        """Environment variable names that could configure delivery for ``lead_type``."""
        names = ["LEAD_ENDPOINT_URL", "LEAD_FORWARD_SECRET"] if use_shared else []
        per_type: Dict[str, List[str]] = {
            "financing-calculator": ["FINANCING_LEAD_ENDPOINT_URL", "FINANCING_LEAD_FORWARD_SECRET"],
            "feedback": ["FEEDBACK_ENDPOINT_URL", "FEEDBACK_FORWARD_SECRET"],
            "special-offer": [
                "SPECIAL_OFFER_ENDPOINT_URL",
                "SPECIAL_OFFER_FORWARD_SECRET",
                "FEEDBACK_ENDPOINT_URL",
                "FEEDBACK_FORWARD_SECRET",
            ],
        }
        return names + per_type.get(lead_type, [])


@lru_cache
def get_settings() -> GatewayConfig:
    return GatewayConfig()
