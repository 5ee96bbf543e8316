"""
chatsync.config.yclients – booking provider (YClients) API config.

Env vars: YCLIENTS_PARTNER_TOKEN, YCLIENTS_DEFAULT_USER_TOKEN, YCLIENTS_COMPANY_ID,
YCLIENTS_BASE_URL, YCLIENTS_TIMEOUT.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chatsync.config._env import env_int, env_str, validate_positive_int

DEFAULT_BASE_URL = "https://api.yclients.com"
API_VERSION_HEADER = "application/vnd.yclients.v2+json"


@dataclass(frozen=True)
class YClientsConfig:
    """Credentials and transport settings for the booking provider API."""

    partner_token: str
    company_id: int
    default_user_token: Optional[str] = None
    """User token used by background jobs (staff/records listing)."""

    base_url: str = DEFAULT_BASE_URL
    timeout: int = 30
    """Per-request timeout in seconds."""

    def __post_init__(self) -> None:
        if not isinstance(self.partner_token, str) or not self.partner_token.strip():
            raise ValueError("YCLIENTS_PARTNER_TOKEN is required and must be non-empty")
        validate_positive_int(self.company_id, "company_id")
        validate_positive_int(self.timeout, "timeout")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")

    @classmethod
    def from_env(cls, **overrides: object) -> YClientsConfig:
        return cls(
            partner_token=env_str(overrides, "partner_token", "YCLIENTS_PARTNER_TOKEN", "") or "",
            company_id=env_int(overrides, "company_id", "YCLIENTS_COMPANY_ID", 0),
            default_user_token=env_str(
                overrides, "default_user_token", "YCLIENTS_DEFAULT_USER_TOKEN", None,
            ),
            base_url=(env_str(overrides, "base_url", "YCLIENTS_BASE_URL", DEFAULT_BASE_URL)
                      or DEFAULT_BASE_URL).rstrip("/"),
            timeout=env_int(overrides, "timeout", "YCLIENTS_TIMEOUT", 30),
        )


def load_yclients_config(**overrides: object) -> YClientsConfig:
    """Load and validate the provider config. Raises ValueError when incomplete."""
    return YClientsConfig.from_env(**overrides)
