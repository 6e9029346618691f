"""Assembly of normalized results from provider payloads."""

from __future__ import annotations

from evesso.models.claims import IdentityClaims
from evesso.models.results import CallbackResult, RefreshResult
from evesso.models.tokens import TokenResponse


def assemble_refresh_result(token: TokenResponse) -> RefreshResult:
    return RefreshResult(
        access_token=token.access_token,
        refresh_token=token.refresh_token,
        expires_in=token.expires_in,
        raw={"token": token.raw},
    )


def assemble_callback_result(
    token: TokenResponse, claims: IdentityClaims, subject_prefix: str
) -> CallbackResult:
    """Combine the token payload and verified claims into one result.

    Args:
        token: Token endpoint response
        claims: Verified claims of the access token
        subject_prefix: Namespace prefix stripped from the subject to get
            the bare character ID

    Returns:
        CallbackResult: Normalized result referencing both raw payloads
    """
    return CallbackResult(
        access_token=token.access_token,
        refresh_token=token.refresh_token,
        expires_in=token.expires_in,
        scopes=claims.scopes,
        owner=claims.owner,
        character_name=claims.name,
        character_id=claims.bare_subject(subject_prefix),
        raw={"token": token.raw, "jwt": claims.raw},
    )
