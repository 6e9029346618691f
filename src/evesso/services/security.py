"""Security utilities for the EVE SSO login round-trip.

Provides the anti-CSRF state parameter and its validation.
"""

from __future__ import annotations

import secrets

from evesso.models.errors import StateMismatchError
from evesso.primitives.pkce import b64url

STATE_ENTROPY_BYTES = 16


def generate_state(num_bytes: int = STATE_ENTROPY_BYTES) -> str:
    """Generate cryptographically secure state parameter.

    The state carries no meaning; it is only compared on callback.

    Args:
        num_bytes: Bytes of randomness, at least 8

    Returns:
        Base64url-encoded random state without padding
    """
    if num_bytes < 8:
        raise ValueError("State needs at least 8 bytes of entropy")
    return b64url(secrets.token_bytes(num_bytes))


def validate_state(expected: str | None, actual: str) -> None:
    """Validate state parameter matches expected value.

    Args:
        expected: State saved when the login was started
        actual: State parameter from the callback URL

    Raises:
        StateMismatchError: If the states are not exactly equal
    """
    if expected is None or not secrets.compare_digest(
        expected.encode("utf-8"), actual.encode("utf-8")
    ):
        raise StateMismatchError("Submitted and received state dont match")
