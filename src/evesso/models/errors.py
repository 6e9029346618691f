"""Exception hierarchy for EVE SSO authentication errors.

Each failure mode of the login round-trip has its own type so callers can
tell a forged callback from a provider rejection or a network outage.
"""

from __future__ import annotations


class SsoError(Exception):
    """Base exception for all EVE SSO related errors."""

    pass


class PKCEError(SsoError):
    """Raised when PKCE parameter generation fails."""

    pass


class CallbackParsingError(SsoError):
    """Raised when the redirect URL lacks the code or state parameters.

    Terminal: the login round-trip has to be started over.
    """

    pass


class StateMismatchError(SsoError):
    """Raised when the callback state differs from the one issued at login.

    This indicates a possible CSRF attack or a stale login attempt.
    """

    pass


class TransportError(SsoError):
    """Raised when a request to the provider produced no response at all."""

    pass


class ProviderError(SsoError):
    """Raised when the token endpoint answered with an error.

    The detail is the provider's ``error_description`` when it sent one,
    otherwise the raw response body.
    """

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class TokenVerificationError(SsoError):
    """Raised when a token's signature cannot be verified.

    Covers malformed tokens, bad signatures, expired tokens and signing
    keys that cannot be resolved.
    """

    pass


class InvalidIssuerError(SsoError):
    """Raised when a correctly signed token names an untrusted issuer."""

    def __init__(self, issuer: str | None):
        super().__init__(f"JWT returned an invalid iss: {issuer!r}")
        self.issuer = issuer
