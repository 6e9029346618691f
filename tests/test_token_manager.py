"""Tests for EVE SSO token exchange.

High-impact tests covering the token endpoint:
- Authorization code and refresh grants with exact form bodies
- Provider error payloads and raw-body fallbacks
- Network failures kept apart from provider errors
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from evesso.models.config import ProviderConfig
from evesso.models.errors import ProviderError, TransportError
from evesso.models.tokens import RefreshTokenRequest, TokenRequest
from evesso.services.tokens import OAuth2TokenManager
from tests.conftest import make_response


class TestTokenExchange:
    """Test authorization code to access token exchange."""

    def setup_method(self):
        # Arrange
        self.token_manager = OAuth2TokenManager(http_client=AsyncMock())
        self.token_request = TokenRequest(
            code="auth-code-123",
            client_id="client-456",
            code_verifier="dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk",
        )

    async def test_successful_token_exchange(self):
        # Arrange
        payload = {
            "access_token": "access-token-xyz",
            "token_type": "Bearer",
            "expires_in": 1199,
            "refresh_token": "refresh-token-abc",
        }
        self.token_manager._http_client.post.return_value = make_response(200, payload)

        # Act
        token_response = await self.token_manager.exchange_code_for_token(
            self.token_request
        )

        # Assert
        assert token_response.access_token == "access-token-xyz"
        assert token_response.refresh_token == "refresh-token-abc"
        assert token_response.expires_in == 1199
        assert token_response.raw is payload

        # Verify HTTP request was made correctly
        self.token_manager._http_client.post.assert_awaited_once()
        call_args = self.token_manager._http_client.post.call_args
        assert call_args[0][0] == "https://login.eveonline.com/v2/oauth/token"
        assert call_args[1]["data"] == {
            "grant_type": "authorization_code",
            "code": "auth-code-123",
            "client_id": "client-456",
            "code_verifier": "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk",
        }

        headers = call_args[1]["headers"]
        assert headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert headers["Host"] == "login.eveonline.com"
        assert "json" not in call_args[1]

    async def test_absent_fields_stay_none(self):
        # Arrange
        self.token_manager._http_client.post.return_value = make_response(
            200, {"access_token": "T", "expires_in": 1200}
        )

        # Act
        token_response = await self.token_manager.exchange_code_for_token(
            self.token_request
        )

        # Assert
        assert token_response.access_token == "T"
        assert token_response.expires_in == 1200
        assert token_response.refresh_token is None
        assert token_response.token_type is None

    async def test_present_but_empty_fields_are_kept(self):
        self.token_manager._http_client.post.return_value = make_response(
            200, {"access_token": "T", "refresh_token": "", "expires_in": 0}
        )

        token_response = await self.token_manager.exchange_code_for_token(
            self.token_request
        )

        assert token_response.refresh_token == ""
        assert token_response.expires_in == 0

    async def test_custom_endpoint_and_host(self):
        # Arrange
        config = ProviderConfig(
            token_endpoint="http://localhost:9000/token", host="localhost:9000"
        )
        token_manager = OAuth2TokenManager(config, http_client=AsyncMock())
        token_manager._http_client.post.return_value = make_response(
            200, {"access_token": "T"}
        )

        # Act
        await token_manager.exchange_code_for_token(self.token_request)

        # Assert
        call_args = token_manager._http_client.post.call_args
        assert call_args[0][0] == "http://localhost:9000/token"
        assert call_args[1]["headers"]["Host"] == "localhost:9000"


class TestTokenRefresh:
    def setup_method(self):
        # Arrange
        self.token_manager = OAuth2TokenManager(http_client=AsyncMock())

    async def test_successful_token_refresh(self):
        # Arrange
        self.token_manager._http_client.post.return_value = make_response(
            200,
            {
                "access_token": "new-access-token-xyz",
                "expires_in": 1199,
                "refresh_token": "new-refresh-token-def",
            },
        )

        # Act
        token_response = await self.token_manager.refresh_access_token(
            RefreshTokenRequest(refresh_token="refresh-token-abc", client_id="client-456")
        )

        # Assert
        assert token_response.access_token == "new-access-token-xyz"
        assert token_response.refresh_token == "new-refresh-token-def"

        call_args = self.token_manager._http_client.post.call_args
        assert call_args[1]["data"] == {
            "grant_type": "refresh_token",
            "refresh_token": "refresh-token-abc",
            "client_id": "client-456",
        }


class TestTokenErrors:
    """Test provider errors and network failures."""

    def setup_method(self):
        # Arrange
        self.token_manager = OAuth2TokenManager(http_client=AsyncMock())
        self.token_request = TokenRequest(
            code="expired-code", client_id="client-456", code_verifier="verifier"
        )

    async def test_error_description_becomes_detail(self):
        # Arrange
        self.token_manager._http_client.post.return_value = make_response(
            400, {"error_description": "invalid_grant"}
        )

        # Act & Assert
        with pytest.raises(ProviderError) as exc_info:
            await self.token_manager.exchange_code_for_token(self.token_request)

        assert exc_info.value.detail == "invalid_grant"
        assert exc_info.value.status_code == 400

    async def test_error_without_description_uses_raw_body(self):
        # Arrange
        self.token_manager._http_client.post.return_value = make_response(
            401, {"error": "invalid_client"}, text='{"error":"invalid_client"}'
        )

        # Act & Assert
        with pytest.raises(ProviderError) as exc_info:
            await self.token_manager.exchange_code_for_token(self.token_request)

        assert exc_info.value.detail == '{"error":"invalid_client"}'

    async def test_non_json_error_uses_raw_body(self):
        # Arrange
        self.token_manager._http_client.post.return_value = make_response(
            502, ValueError("Not valid JSON"), text="<html>Bad Gateway</html>"
        )

        # Act & Assert
        with pytest.raises(ProviderError) as exc_info:
            await self.token_manager.exchange_code_for_token(self.token_request)

        assert exc_info.value.detail == "<html>Bad Gateway</html>"

    async def test_non_json_success_raises_provider_error(self):
        self.token_manager._http_client.post.return_value = make_response(
            200, ValueError("Not valid JSON"), text="oops"
        )

        with pytest.raises(ProviderError):
            await self.token_manager.exchange_code_for_token(self.token_request)

    async def test_network_error_raises_transport_error(self):
        # Arrange
        self.token_manager._http_client.post.side_effect = httpx.ConnectError(
            "Connection failed"
        )

        # Act & Assert
        with pytest.raises(TransportError):
            await self.token_manager.exchange_code_for_token(self.token_request)

    async def test_timeout_raises_transport_error(self):
        self.token_manager._http_client.post.side_effect = httpx.ReadTimeout(
            "Timed out"
        )

        with pytest.raises(TransportError):
            await self.token_manager.refresh_access_token(
                RefreshTokenRequest(refresh_token="r", client_id="c")
            )

    async def test_request_is_not_retried(self):
        self.token_manager._http_client.post.return_value = make_response(
            400, {"error_description": "invalid_grant"}
        )

        with pytest.raises(ProviderError):
            await self.token_manager.exchange_code_for_token(self.token_request)

        assert self.token_manager._http_client.post.await_count == 1


class TestClose:
    async def test_injected_client_is_not_closed(self):
        http_client = AsyncMock()
        token_manager = OAuth2TokenManager(http_client=http_client)

        await token_manager.close()

        http_client.aclose.assert_not_awaited()

    async def test_owned_client_is_closed(self):
        with patch("httpx.AsyncClient", return_value=AsyncMock()):
            token_manager = OAuth2TokenManager()

        await token_manager.close()

        token_manager._http_client.aclose.assert_awaited_once()
