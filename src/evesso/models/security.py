"""Security-related models for the EVE SSO login round-trip.

Contains PKCE parameters and the login request handed to callers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# base64url of 32 random bytes, and of a SHA-256 digest, both unpadded
_ENCODED_32_BYTES = re.compile(r"^[A-Za-z0-9_-]{43}$")


@dataclass(frozen=True)
class PKCEParameters:
    """Verifier and S256 challenge for one login attempt.

    Both values are 32 bytes encoded as 43 base64url characters; the
    verifier is the clear code the caller keeps until the callback.
    """

    code_verifier: str
    code_challenge: str
    code_challenge_method: str = "S256"

    def __post_init__(self) -> None:
        if not _ENCODED_32_BYTES.fullmatch(self.code_verifier):
            raise ValueError("code_verifier must be 32 bytes, base64url without padding")
        if not _ENCODED_32_BYTES.fullmatch(self.code_challenge):
            raise ValueError("code_challenge must be a base64url SHA-256 digest")
        if self.code_challenge_method != "S256":
            raise ValueError("EVE SSO logins use the S256 challenge method")


@dataclass(frozen=True)
class LoginRequest:
    """Everything needed to send a user to the EVE login page.

    ``state`` and ``clear_code`` must be persisted by the caller unchanged
    and handed back to ``SsoProvider.handle_callback``.
    """

    url: str
    state: str
    clear_code: str
