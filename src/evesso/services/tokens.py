"""EVE SSO token exchange service.

Implements the RFC 6749 token endpoint interactions: the PKCE
authorization code grant (RFC 7636) and the refresh token grant.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from evesso.models.config import ProviderConfig
from evesso.models.errors import ProviderError, TransportError
from evesso.models.tokens import RefreshTokenRequest, TokenRequest, TokenResponse

logger = logging.getLogger(__name__)


class OAuth2TokenManager:
    """Manages token exchange and refresh against the EVE SSO.

    Both grants share one POST to the token endpoint, form encoded, with
    an explicit Host header. No request is ever retried: authorization
    codes are single-use, so retrying a failed exchange is the caller's
    decision and usually means starting the login over.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the token manager.

        Args:
            config: Provider endpoints, defaults to the live EVE SSO
            http_client: Client to send requests with. When omitted the
                manager creates and owns one.
        """
        self.config = config or ProviderConfig()
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout
        )

    async def exchange_code_for_token(self, token_request: TokenRequest) -> TokenResponse:
        """Exchange an authorization code for tokens.

        Args:
            token_request: Code and PKCE verifier from the login round-trip

        Returns:
            TokenResponse: The provider's payload

        Raises:
            ProviderError: If the token endpoint rejected the request
            TransportError: If the token endpoint could not be reached
        """
        logger.debug(f"Exchanging authorization code at {self.config.token_endpoint}")
        return await self._fetch_token(token_request.to_form_data())

    async def refresh_access_token(
        self, refresh_request: RefreshTokenRequest
    ) -> TokenResponse:
        """Get a new access token for a refresh token.

        Raises:
            ProviderError: If the token endpoint rejected the request
            TransportError: If the token endpoint could not be reached
        """
        logger.debug(f"Refreshing access token at {self.config.token_endpoint}")
        return await self._fetch_token(refresh_request.to_form_data())

    async def _fetch_token(self, form_data: dict[str, str]) -> TokenResponse:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Host": self.config.host,
            "Accept": "application/json",
        }

        # Never log codes or tokens
        logger.debug(
            f"Token request: grant_type={form_data['grant_type']}, "
            f"client_id={form_data['client_id']}"
        )

        try:
            response = await self._http_client.post(
                self.config.token_endpoint,
                data=form_data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error during token request: {e}") from e

        return self._parse_token_response(response)

    def _parse_token_response(self, response: httpx.Response) -> TokenResponse:
        """Parse a token endpoint response.

        The provider sends structured JSON errors on error statuses, so the
        body is read either way.

        Raises:
            ProviderError: On an error status or an unusable success body
        """
        status_code = response.status_code

        if 200 <= status_code < 300:
            try:
                payload = response.json()
                if not isinstance(payload, dict):
                    raise ValueError(f"expected a JSON object, got {response.text}")
                token_response = TokenResponse.from_payload(payload)
            except (ValueError, ValidationError) as e:
                raise ProviderError(
                    f"Invalid token response format: {e}", status_code
                ) from e

            logger.info("Token request successful")
            return token_response

        detail = self._error_detail(response)
        logger.warning(f"Token request failed with {status_code}: {detail}")
        raise ProviderError(detail, status_code)

    def _error_detail(self, response: httpx.Response) -> str:
        try:
            payload: Any = response.json()
        except ValueError:
            return response.text

        if isinstance(payload, dict) and "error_description" in payload:
            return str(payload["error_description"])
        return response.text

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_http_client:
            await self._http_client.aclose()
