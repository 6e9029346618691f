"""PKCE (Proof Key for Code Exchange) generator for the EVE SSO.

Implements RFC 7636 S256 parameter generation to prevent authorization
code interception attacks.
"""

from __future__ import annotations

import base64
import hashlib
import secrets

from evesso.models.errors import PKCEError
from evesso.models.security import PKCEParameters

VERIFIER_ENTROPY_BYTES = 32


def b64url(data: bytes) -> str:
    """Base64url-encode bytes with the trailing padding stripped."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class PKCEManager:
    """Generates PKCE parameters for EVE SSO logins.

    This implementation follows RFC 7636 requirements:
    - Uses S256 code challenge method (SHA256 + base64url)
    - Encodes 32 bytes of secure randomness into the verifier, so the
      full entropy of the random source survives the encoding
    """

    def generate_parameters(self) -> PKCEParameters:
        """Generate new PKCE parameters for an authorization flow.

        Returns:
            PKCEParameters: Immutable parameters for the authorization flow

        Raises:
            PKCEError: If parameter generation fails
        """
        try:
            code_verifier = self.generate_code_verifier()
            code_challenge = self.generate_code_challenge(code_verifier)

            return PKCEParameters(
                code_verifier=code_verifier,
                code_challenge=code_challenge,
                code_challenge_method="S256",
            )

        except Exception as e:
            raise PKCEError(f"Failed to generate PKCE parameters: {e}") from e

    def generate_code_verifier(self) -> str:
        """Generate a 43-character code verifier from 32 random bytes.

        The base64url alphabet is a subset of the RFC 7636 unreserved
        characters, so the result is a valid verifier as-is.
        """
        return b64url(secrets.token_bytes(VERIFIER_ENTROPY_BYTES))

    def generate_code_challenge(self, code_verifier: str) -> str:
        """Generate code challenge from code verifier using S256 method.

        RFC 7636 Section 4.2: For S256, the code challenge is:
        BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))

        Args:
            code_verifier: The code verifier to hash

        Returns:
            Base64url-encoded SHA256 hash of the code verifier
        """
        digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
        return b64url(digest)
