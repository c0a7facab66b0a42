# domain/model/session.py

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AccessTokenClaims:
    """Decoded content of a bearer access token."""
    subject: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Expired strictly after expires_at; valid at the boundary itself."""
        return now > self.expires_at
