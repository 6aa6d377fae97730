"""Password hashing and bearer-token handling.

Passwords are hashed with bcrypt (salt cost 10). Tokens are HS256 JWTs
carrying ``{"id", "iat", "exp"}``; expiry is checked here against an
injectable clock so that a token stops validating exactly ``ttl_seconds``
after it was issued.
"""

import time
from typing import Callable

import bcrypt
from jose import jwt
from jose.exceptions import JOSEError

from .errors import ConfigurationError, InvalidTokenError, ValidationError

ALGORITHM = "HS256"
BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes.")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))


class TokenIssuer:
    def __init__(
        self,
        secret: str | None,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _require_secret(self) -> str:
        if not self._secret:
            raise ConfigurationError()
        return self._secret

    def issue(self, user_id: str) -> str:
        secret = self._require_secret()
        issued_at = int(self._clock())
        claims = {"id": user_id, "iat": issued_at, "exp": issued_at + self.ttl_seconds}
        return jwt.encode(claims, secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> str:
        secret = self._require_secret()
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JOSEError as exc:
            raise InvalidTokenError() from exc

        user_id = claims.get("id")
        expires_at = claims.get("exp")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        if not isinstance(expires_at, (int, float)) or self._clock() >= expires_at:
            raise InvalidTokenError()
        return user_id
