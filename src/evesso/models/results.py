"""Normalized results returned to callers of the SSO client.

Field names are stable regardless of how the provider names things in its
payloads. A field is ``None`` exactly when its source was absent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RefreshResult:
    """Result of exchanging a refresh token.

    ``raw["token"]`` is the unmodified token endpoint payload.
    """

    access_token: str | None
    refresh_token: str | None
    expires_in: int | None
    raw: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class CallbackResult:
    """Result of a completed login callback.

    ``raw["token"]`` is the token endpoint payload, ``raw["jwt"]`` the
    verified claims of the access token.
    """

    access_token: str | None
    refresh_token: str | None
    expires_in: int | None
    scopes: list[str] | None
    owner: str | None
    character_name: str | None
    character_id: str | None
    raw: dict[str, dict[str, Any]] = field(default_factory=dict)
