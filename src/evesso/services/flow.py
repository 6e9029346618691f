"""EVE SSO authorization flow service.

Builds the login URL with PKCE and state, and validates the redirect the
provider sends back.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import parse_qs, urlparse

from evesso.models.config import ProviderConfig
from evesso.models.errors import CallbackParsingError
from evesso.models.flow import AuthorizationRequest, CallbackParams
from evesso.models.security import LoginRequest
from evesso.primitives.pkce import PKCEManager
from evesso.services.security import generate_state, validate_state

logger = logging.getLogger(__name__)


def extract_callback_params(callback_url: str) -> CallbackParams:
    """Parse the code and state out of a redirect URL.

    Pure parsing: no network access and no state comparison.

    Args:
        callback_url: Full URL the provider redirected the user to

    Returns:
        CallbackParams: The code and state from the query string

    Raises:
        CallbackParsingError: If the query string, code or state is missing
    """
    query = urlparse(callback_url).query
    if not query:
        raise CallbackParsingError("No query parameters in the callback")

    query_params = parse_qs(query, keep_blank_values=True)
    code = query_params.get("code")
    state = query_params.get("state")
    if code is None or state is None:
        raise CallbackParsingError("No query parameters in the callback")

    return CallbackParams(code=code[0], state=state[0])


class OAuth2FlowManager:
    """Orchestrates the two halves of the login redirect.

    Handles:
    - PKCE parameter and state generation
    - Authorization URL construction
    - Callback URL parsing and state validation (CSRF protection)
    """

    def __init__(self, client_id: str, config: ProviderConfig | None = None):
        self.client_id = client_id
        self.config = config or ProviderConfig()
        self._pkce_manager = PKCEManager()

    def start_authorization_flow(
        self, callback_url: str, scopes: Sequence[str]
    ) -> LoginRequest:
        """Start a login by generating the URL the user should visit.

        Args:
            callback_url: Callback URL registered for the application
            scopes: Scopes to request, in order, or a single scope string

        Returns:
            LoginRequest: URL plus the state and clear code to persist
        """
        # A lone scope string is one scope, not a sequence of characters
        if isinstance(scopes, str):
            scopes = (scopes,)

        pkce_params = self._pkce_manager.generate_parameters()
        state = generate_state()

        auth_request = AuthorizationRequest(
            authorization_endpoint=self.config.authorization_endpoint,
            client_id=self.client_id,
            redirect_uri=callback_url,
            code_challenge=pkce_params.code_challenge,
            code_challenge_method=pkce_params.code_challenge_method,
            state=state,
            scopes=tuple(scopes),
        )

        authorization_url = auth_request.build_authorization_url()

        logger.info(f"Generated authorization URL for client {self.client_id}")

        return LoginRequest(
            url=authorization_url,
            state=state,
            clear_code=pkce_params.code_verifier,
        )

    def handle_authorization_callback(
        self, callback_url: str, expected_state: str | None
    ) -> CallbackParams:
        """Parse the callback URL and check its state.

        Args:
            callback_url: Full callback URL received from the provider
            expected_state: State saved when the login was started

        Returns:
            CallbackParams: Validated code and state

        Raises:
            CallbackParsingError: If the callback URL lacks code or state
            StateMismatchError: If the state does not match
        """
        logger.debug("Processing authorization callback")

        params = extract_callback_params(callback_url)
        validate_state(expected_state, params.state)

        logger.info("Authorization callback successful - received authorization code")
        return params
