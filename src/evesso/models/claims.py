"""Verified identity claims carried by an EVE SSO access token."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, SkipValidation


class IdentityClaims(BaseModel):
    """Claims of a token whose signature and issuer have been verified.

    Only claims present in the token are set; ``raw`` keeps the full
    decoded payload.
    """

    model_config = ConfigDict(frozen=True)

    issuer: str
    subject: str | None = None
    scopes: list[str] | None = None
    owner: str | None = None
    name: str | None = None
    # NumericDate, which may be fractional
    expires_at: int | float | None = None
    raw: SkipValidation[dict[str, Any]]

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> IdentityClaims:
        scopes = payload.get("scp")
        # A single scope is sent as a bare string
        if isinstance(scopes, str):
            scopes = [scopes]

        return cls(
            issuer=payload["iss"],
            subject=payload.get("sub"),
            scopes=scopes,
            owner=payload.get("owner"),
            name=payload.get("name"),
            expires_at=payload.get("exp"),
            raw=payload,
        )

    def bare_subject(self, prefix: str) -> str | None:
        """Return the subject with the provider namespace prefix removed.

        ``CHARACTER:EVE:123456`` becomes ``123456``.
        """
        if self.subject is None:
            return None
        return self.subject.removeprefix(prefix)
