"""EVE SSO client orchestration.

Coordinates login URL generation, callback validation, token exchange and
token verification into the three operations an application needs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from evesso.models.config import ProviderConfig
from evesso.models.errors import ProviderError
from evesso.models.results import CallbackResult, RefreshResult
from evesso.models.security import LoginRequest
from evesso.models.tokens import RefreshTokenRequest, TokenRequest
from evesso.services.flow import OAuth2FlowManager
from evesso.services.keys import SigningKeyResolver
from evesso.services.results import assemble_callback_result, assemble_refresh_result
from evesso.services.tokens import OAuth2TokenManager
from evesso.services.verifier import TokenVerifier

logger = logging.getLogger(__name__)


class SsoProvider:
    """PKCE login client for the EVE Online SSO.

    Typical use::

        sso = SsoProvider(client_id)
        login = sso.get_login("https://myapp.example/callback", ["publicData"])
        # persist login.state and login.clear_code, redirect to login.url
        result = await sso.handle_callback(redirect_url, state, clear_code)

    Nothing is retried internally. In particular a failed
    ``handle_callback`` must not be repeated with the same redirect URL:
    authorization codes are single-use, so the login has to start over.
    """

    def __init__(
        self,
        client_id: str,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the SSO client.

        Args:
            client_id: Client ID of the application registered with the SSO
            config: Provider endpoints and trust settings, defaults to the
                live EVE SSO
            http_client: Optional shared HTTP client. When omitted each
                service creates and owns its own.
        """
        self.client_id = str(client_id)
        self.config = config or ProviderConfig()

        self.flow_manager = OAuth2FlowManager(self.client_id, self.config)
        self.token_manager = OAuth2TokenManager(self.config, http_client)
        self.key_resolver = SigningKeyResolver(self.config, http_client)
        self.verifier = TokenVerifier(self.key_resolver, self.config)

    def get_login(self, callback_url: str, scopes: Sequence[str]) -> LoginRequest:
        """Return everything needed to start the login.

        Args:
            callback_url: Callback URL set for the application on
                developers.eveonline.com
            scopes: Scopes to ask for on login

        Returns:
            LoginRequest: The login URL, and the state and clear code the
            caller must save for the callback
        """
        return self.flow_manager.start_authorization_flow(callback_url, scopes)

    async def handle_callback(
        self, url: str, saved_state: str | None, saved_clear_code: str
    ) -> CallbackResult:
        """Complete a login from the URL the SSO redirected to.

        The URL and state are checked before any request is made.

        Args:
            url: Full redirect URL, including its query string
            saved_state: State saved from ``get_login``
            saved_clear_code: Clear code saved from ``get_login``

        Returns:
            CallbackResult: Normalized tokens and character identity

        Raises:
            CallbackParsingError: If the URL lacks code or state
            StateMismatchError: If the state does not match ``saved_state``
            ProviderError: If the token endpoint rejected the code
            TransportError: If the token endpoint could not be reached
            TokenVerificationError: If the access token does not verify
            InvalidIssuerError: If the access token's issuer is not trusted
        """
        params = self.flow_manager.handle_authorization_callback(url, saved_state)

        logger.debug("Exchanging authorization code for tokens")
        token = await self.token_manager.exchange_code_for_token(
            TokenRequest(
                code=params.code,
                client_id=self.client_id,
                code_verifier=saved_clear_code,
            )
        )
        if token.access_token is None:
            raise ProviderError("Token response missing required access_token")

        logger.debug("Verifying access token")
        claims = await self.verifier.verify(token.access_token)

        result = assemble_callback_result(token, claims, self.config.subject_prefix)
        logger.info(f"Login completed for character {result.character_id}")
        return result

    async def refresh(self, refresh_token: str) -> RefreshResult:
        """Return a new access token for the given refresh token.

        Raises:
            ProviderError: If the token endpoint rejected the refresh token
            TransportError: If the token endpoint could not be reached
        """
        token = await self.token_manager.refresh_access_token(
            RefreshTokenRequest(refresh_token=refresh_token, client_id=self.client_id)
        )
        return assemble_refresh_result(token)

    async def close(self) -> None:
        """Close all service connections."""
        await self.token_manager.close()
        await self.key_resolver.close()

    async def __aenter__(self) -> SsoProvider:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
