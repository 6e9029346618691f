"""Authorization flow models for the EVE SSO.

Contains models for authorization requests and callback handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from evesso.primitives.query import build_provider_query


@dataclass(frozen=True)
class AuthorizationRequest:
    """Authorization request parameters for the PKCE login flow."""

    authorization_endpoint: str
    client_id: str
    redirect_uri: str
    code_challenge: str
    state: str
    scopes: tuple[str, ...] = field(default_factory=tuple)
    code_challenge_method: str = "S256"

    def build_authorization_url(self) -> str:
        """Build the complete authorization URL.

        Parameter order is fixed so the URL can be compared exactly.
        """
        params = {
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "scope": self.scopes,
            "code_challenge": self.code_challenge,
            "code_challenge_method": self.code_challenge_method,
            "state": self.state,
        }

        return self.authorization_endpoint + build_provider_query(params)


@dataclass(frozen=True)
class CallbackParams:
    code: str
    state: str
