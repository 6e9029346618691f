"""Signing key resolution for EVE SSO tokens.

Fetches the provider's JSON Web Key Set and caches its keys by key id for
the lifetime of the resolver.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import jwt
from jwt.exceptions import PyJWTError

from evesso.models.config import ProviderConfig
from evesso.models.errors import TokenVerificationError

logger = logging.getLogger(__name__)


class SigningKeyResolver:
    """Read-through cache of the provider's public signing keys.

    A key id missing from the cache triggers one fetch of the key set.
    Concurrent misses for the same key id may each fetch; the last write
    wins and the keys are identical, so that is harmless.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ProviderConfig()
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout
        )
        self._keys: dict[str, jwt.PyJWK] = {}

    async def get_signing_key(self, kid: str) -> jwt.PyJWK:
        """Return the public key for a key id.

        Args:
            kid: Key id from the token header

        Returns:
            The matching key from the provider's key set

        Raises:
            TokenVerificationError: If the key set cannot be fetched or
                holds no usable key with this id
        """
        key = self._keys.get(kid)
        if key is not None:
            return key

        logger.debug(f"Signing key {kid} not cached, fetching key set")
        self._store_keys(await self._fetch_jwks())

        key = self._keys.get(kid)
        if key is None:
            logger.warning(f"Signing key not found: {kid}")
            raise TokenVerificationError(f"Signing key not found: {kid}")
        return key

    async def _fetch_jwks(self) -> dict[str, Any]:
        try:
            response = await self._http_client.get(
                self.config.jwks_uri, headers={"Accept": "application/json"}
            )
            response.raise_for_status()
            jwks = response.json()
        except httpx.HTTPError as e:
            raise TokenVerificationError(f"Failed to fetch signing keys: {e}") from e
        except ValueError as e:
            raise TokenVerificationError(f"Invalid key set format: {e}") from e

        if not isinstance(jwks, dict) or not isinstance(jwks.get("keys"), list):
            raise TokenVerificationError("Invalid key set format: missing keys")
        return jwks

    def _store_keys(self, jwks: dict[str, Any]) -> None:
        stored = 0
        for key_data in jwks["keys"]:
            kid = key_data.get("kid") if isinstance(key_data, dict) else None
            if not kid:
                continue
            try:
                self._keys[kid] = jwt.PyJWK(key_data)
            except PyJWTError as e:
                # The key set may hold keys for algorithms we cannot use
                logger.debug(f"Skipping unusable signing key {kid}: {e}")
                continue
            stored += 1

        logger.info(f"Signing keys refreshed: {stored} usable")

    def clear_cache(self) -> None:
        self._keys.clear()

    async def close(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._owns_http_client:
            await self._http_client.aclose()
