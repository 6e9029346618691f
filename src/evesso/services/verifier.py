"""Signed-token verification for EVE SSO access tokens.

The access token is a JWT signed with one of the keys published in the
provider's key set. A token is trusted only when its signature verifies
against that key and its issuer is on the allow-list.
"""

from __future__ import annotations

import logging

import jwt
from jwt.exceptions import PyJWTError
from pydantic import ValidationError

from evesso.models.claims import IdentityClaims
from evesso.models.config import ProviderConfig
from evesso.models.errors import InvalidIssuerError, TokenVerificationError
from evesso.services.keys import SigningKeyResolver

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Verifies access tokens and extracts their identity claims."""

    def __init__(
        self,
        key_resolver: SigningKeyResolver,
        config: ProviderConfig | None = None,
    ):
        self.config = config or ProviderConfig()
        self._key_resolver = key_resolver

    async def verify(self, token: str) -> IdentityClaims:
        """Verify a token's signature and issuer.

        Args:
            token: Encoded JWT access token

        Returns:
            IdentityClaims: The verified claims

        Raises:
            TokenVerificationError: If the token is malformed, expired, signed
                with an unknown key or its signature does not verify
            InvalidIssuerError: If the signature is valid but the issuer is
                not accepted
        """
        try:
            header = jwt.get_unverified_header(token)
        except PyJWTError as e:
            raise TokenVerificationError(f"Malformed token: {e}") from e

        kid = header.get("kid")
        if not kid:
            raise TokenVerificationError("Token header missing key ID")

        signing_key = await self._key_resolver.get_signing_key(kid)
        if signing_key.algorithm_name not in self.config.algorithms:
            raise TokenVerificationError(
                f"Signing key {kid} uses unsupported algorithm "
                f"{signing_key.algorithm_name}"
            )

        try:
            payload = jwt.decode(
                token,
                signing_key.key,
                # Only the key's own algorithm is accepted
                algorithms=[signing_key.algorithm_name],
                # Audience is the client id and is not checked
                options={"verify_aud": False},
            )
        except PyJWTError as e:
            logger.warning(f"Token verification failed: {e}")
            raise TokenVerificationError(f"Token verification failed: {e}") from e

        issuer = payload.get("iss")
        if issuer not in self.config.accepted_issuers:
            logger.warning(f"Token issued by untrusted issuer {issuer!r}")
            raise InvalidIssuerError(issuer)

        try:
            claims = IdentityClaims.from_payload(payload)
        except ValidationError as e:
            raise TokenVerificationError(f"Invalid token claims: {e}") from e

        logger.info(f"Token verified successfully for {claims.subject}")
        return claims
