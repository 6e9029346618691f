"""Static provider configuration for the EVE SSO endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

EVE_LOGIN_HOST = "login.eveonline.com"


class ProviderConfig(BaseModel):
    """Endpoints and trust settings for the identity provider.

    Defaults point at the live EVE Online SSO. Override any field to run
    against a substitute provider, e.g. a local mock in tests.
    """

    model_config = ConfigDict(frozen=True)

    authorization_endpoint: str = f"https://{EVE_LOGIN_HOST}/v2/oauth/authorize"
    token_endpoint: str = f"https://{EVE_LOGIN_HOST}/v2/oauth/token"
    jwks_uri: str = f"https://{EVE_LOGIN_HOST}/oauth/jwks"

    # Sent as an explicit Host header on token requests
    host: str = EVE_LOGIN_HOST

    # The SSO is inconsistent about the iss form, so both are accepted
    accepted_issuers: tuple[str, ...] = Field(
        default=(EVE_LOGIN_HOST, f"https://{EVE_LOGIN_HOST}"), min_length=1
    )
    subject_prefix: str = "CHARACTER:EVE:"
    algorithms: tuple[str, ...] = Field(default=("RS256", "ES256"), min_length=1)

    timeout: float = 30.0

    @field_validator("algorithms")
    @classmethod
    def validate_algorithms(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for algorithm in v:
            if algorithm.upper() == "NONE" or algorithm.startswith("HS"):
                raise ValueError(
                    f"Only asymmetric signing algorithms are allowed: {algorithm}"
                )
        return v
