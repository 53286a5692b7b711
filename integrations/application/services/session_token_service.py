"""
Session token service.

Issues and verifies the signed session tokens that registered apps
present in the X-Access-Token header.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from typing import Optional

import jwt
from django.conf import settings
from django.utils import timezone

from core.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_HOURS = 24
DEFAULT_SESSION_ALGORITHM = "HS256"


@dataclass(frozen=True)
class AppSession:
    """Claims carried by a verified session token."""

    app_id: uuid.UUID
    is_admin: bool
    expires_at: datetime


class SessionTokenService:
    """Service signing and verifying app session tokens with PyJWT."""

    def __init__(
        self,
        secret: Optional[str] = None,
        ttl_hours: Optional[int] = None,
        algorithm: Optional[str] = None,
    ):
        self.secret = secret or getattr(settings, "APP_SESSION_SECRET", settings.SECRET_KEY)
        self.ttl = timedelta(
            hours=ttl_hours or getattr(settings, "APP_SESSION_TTL_HOURS", DEFAULT_SESSION_TTL_HOURS)
        )
        self.algorithm = algorithm or getattr(
            settings, "APP_SESSION_ALGORITHM", DEFAULT_SESSION_ALGORITHM
        )

    def issue(self, app_id: uuid.UUID, is_admin: bool, now: Optional[datetime] = None):
        """
        Sign a session token for an authenticated app.

        Args:
            app_id: Registered app UUID
            is_admin: Admin flag of the app
            now: Issue timestamp (defaults to current time)

        Returns:
            Tuple of (token, expires_at)
        """
        issued_at = now or timezone.now()
        expires_at = issued_at + self.ttl
        payload = {
            "sub": str(app_id),
            "adm": bool(is_admin),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token, expires_at

    def verify(self, token: str) -> AppSession:
        """
        Verify a session token.

        Args:
            token: Token from the X-Access-Token header

        Returns:
            AppSession with the token claims

        Raises:
            AuthenticationError: If the token is malformed, tampered or expired
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
            return AppSession(
                app_id=uuid.UUID(claims["sub"]),
                is_admin=bool(claims.get("adm", False)),
                expires_at=datetime.fromtimestamp(claims["exp"], tz=dt_timezone.utc),
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Expired session token presented")
            raise AuthenticationError() from e
        except (jwt.InvalidTokenError, ValueError) as e:
            logger.warning("Invalid session token presented: %s", e)
            raise AuthenticationError() from e
