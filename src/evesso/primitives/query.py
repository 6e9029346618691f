"""Provider-compatible query string encoder.

The EVE SSO expects authorization parameters exactly as it documents them:
values inserted verbatim and multiple scopes separated by a literal
``%20``. ``urllib.parse.urlencode`` would escape the redirect URI and use
``+`` for spaces, which produces a different (if equivalent) URL. Callers
compare the generated URL byte for byte, so the deviation from strict
percent-encoding is deliberate and must be preserved.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

SCOPE_SEPARATOR = "%20"


def build_provider_query(params: Mapping[str, str | Sequence[str]]) -> str:
    """Build a ``?``-prefixed query string in mapping order.

    Args:
        params: Ordered parameters. List or tuple values are joined with
            ``%20``; string values are inserted as-is.

    Returns:
        The query string, or an empty string when there are no parameters
    """
    parts = []
    for name, value in params.items():
        if isinstance(value, str):
            parts.append(f"{name}={value}")
        else:
            parts.append(f"{name}={SCOPE_SEPARATOR.join(value)}")

    if not parts:
        return ""
    return "?" + "&".join(parts)
