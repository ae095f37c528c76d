"""
Flare Network API credentials.

The host stores the credential as {"apiKey": ..., "baseUrl": ...}; the node
validates it once per batch into a read-only FlareCredentials value.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.node_registry.models import CredentialDefinition

from .errors import ConfigurationError


CREDENTIAL_TYPE = "flareNetworkApi"

MAINNET_BASE_URL = "https://flare-api.flare.network/v1"
SONGBIRD_BASE_URL = "https://songbird-api.flare.network/v1"

BASE_URLS = {
    MAINNET_BASE_URL: "Flare Mainnet",
    SONGBIRD_BASE_URL: "Songbird Testnet",
}


FLARE_NETWORK_API = CredentialDefinition(
    name=CREDENTIAL_TYPE,
    display_name="Flare Network API",
    documentation_url="https://docs.flare.network/",
    auth_type="apiKey",
    properties=[
        {
            "displayName": "API Key",
            "name": "apiKey",
            "type": "string",
            "typeOptions": {"password": True},
            "required": True,
            "default": "",
            "description": "API key for Flare Network API access",
        },
        {
            "displayName": "API Base URL",
            "name": "baseUrl",
            "type": "options",
            "options": [{"name": name, "value": url} for url, name in BASE_URLS.items()],
            "required": True,
            "default": MAINNET_BASE_URL,
            "description": "Base URL for the Flare Network API",
        },
    ],
)


class FlareCredentials(BaseModel):
    """Validated credentials, shared read-only by every item of a batch."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(..., alias="apiKey", min_length=1)
    base_url: str = Field(MAINNET_BASE_URL, alias="baseUrl")

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: Any) -> str:
        if v in (None, ""):
            return MAINNET_BASE_URL
        url = str(v).rstrip("/")
        if url not in BASE_URLS:
            raise ValueError(f"baseUrl must be one of: {', '.join(BASE_URLS)}")
        return url

    @classmethod
    def from_host(cls, data: Dict[str, Any]) -> "FlareCredentials":
        """
        Validate the credential dict handed over by the host.

        Raises:
            ConfigurationError: if the API key is missing or the base URL is unknown
        """
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid {CREDENTIAL_TYPE} credentials: {problems}") from e


__all__ = [
    "BASE_URLS",
    "CREDENTIAL_TYPE",
    "FLARE_NETWORK_API",
    "FlareCredentials",
    "MAINNET_BASE_URL",
    "SONGBIRD_BASE_URL",
]
