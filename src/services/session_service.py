"""Session issuer — mint and validate bearer access tokens.

Tokens are HS256 JWTs carrying sub/iat/exp. Nothing is stored server-side.
Expiry is checked against the injected clock rather than the JWT library's
wall clock, so tests can move time deterministically.
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.errors import UnauthorizedError
from domain.model.session import AccessTokenClaims
from port.clock import Clock

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = 7

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS = timedelta(milliseconds=1)


def _to_numeric_date(moment: datetime) -> float:
    """Seconds since epoch, rounded up to whole milliseconds.

    Rounding up keeps expiry at or after issue time + ttl.
    """
    return -((_EPOCH - moment) // _MS) / 1000


def _from_numeric_date(value) -> datetime:
    return _EPOCH + round(float(value) * 1000) * _MS


class SessionIssuer:
    def __init__(
        self,
        secret_key: str | None,
        clock: Clock,
        algorithm: str = JWT_ALGORITHM,
        ttl: timedelta = timedelta(days=JWT_EXPIRATION_DAYS),
    ):
        if not secret_key:
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        self._secret_key = secret_key
        self.clock = clock
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: str) -> str:
        """Create an access token for user_id, valid for ttl from now."""
        issued_at = _to_numeric_date(self.clock.now())
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.ttl.total_seconds(),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> AccessTokenClaims:
        """Verify token signature and expiry and return its claims.

        Raises:
            UnauthorizedError: malformed, badly signed, incomplete or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
            claims = AccessTokenClaims(
                subject=payload["sub"],
                issued_at=_from_numeric_date(payload["iat"]),
                expires_at=_from_numeric_date(payload["exp"]),
            )
        except (JWTError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"JWT verification failed: {e}")
            raise UnauthorizedError("Invalid authentication credentials") from e

        if not isinstance(claims.subject, str) or not claims.subject:
            raise UnauthorizedError("Invalid authentication credentials")
        if claims.is_expired(self.clock.now()):
            raise UnauthorizedError("Access token has expired")
        return claims

    def validate(self, token: str) -> str:
        """Return the user id a valid token was issued for."""
        return self.decode(token).subject
