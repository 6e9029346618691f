import json
import time
from typing import Any
from unittest.mock import MagicMock

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm


class TokenFactory:
    """Signs test JWTs and publishes the matching key set."""

    def __init__(self, kid: str = "JWT-Signature-Key"):
        self.kid = kid
        self.private_key = rsa.generate_private_key(
            public_exponent=65537, key_size=2048
        )

    @property
    def jwks(self) -> dict[str, Any]:
        public_jwk = json.loads(RSAAlgorithm.to_jwk(self.private_key.public_key()))
        public_jwk.update({"kid": self.kid, "alg": "RS256", "use": "sig"})
        return {"keys": [public_jwk]}

    def claims(self, **overrides: Any) -> dict[str, Any]:
        now = int(time.time())
        claims = {
            "scp": ["esi-skills.read_skills.v1", "esi-wallet.read_character_wallet.v1"],
            "jti": "998e12c7-3241-43c5-8355-2c48822e0a1b",
            "kid": self.kid,
            "sub": "CHARACTER:EVE:123456",
            "azp": "client-123",
            "tenant": "tranquility",
            "tier": "live",
            "region": "world",
            "aud": ["client-123", "EVE Online"],
            "name": "Some Bloke",
            "owner": "8PmzCeTKb4VFUDrHLc/AeZXDSWM=",
            "exp": now + 1200,
            "iat": now,
            "iss": "https://login.eveonline.com",
        }
        claims.update(overrides)
        return claims

    def sign(self, claims: dict[str, Any], kid: str | None = None) -> str:
        return jwt.encode(
            claims,
            self.private_key,
            algorithm="RS256",
            headers={"kid": kid or self.kid},
        )


@pytest.fixture(scope="session")
def token_factory() -> TokenFactory:
    return TokenFactory()


def make_response(
    status_code: int, payload: Any = None, text: str | None = None
) -> MagicMock:
    """Build a mock httpx response with a JSON body."""
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
        response.text = text or ""
    else:
        response.json.return_value = payload
        response.text = text if text is not None else json.dumps(payload)
    return response


@pytest.fixture
def response_factory():
    return make_response
