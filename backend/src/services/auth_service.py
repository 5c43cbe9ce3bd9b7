"""Admin authentication for the problem review endpoints.

There is a single shared admin secret. Callers pass an explicit
AdminCredential into every admin operation instead of relying on any
process-wide session state.

The per-request password path mirrors how the review dashboard has always
authenticated and is kept for compatibility. Logging in also issues a
signed, expiring session token which clients should prefer.
"""

import hmac
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError


class AuthorizationError(Exception):
    """Missing or wrong admin credential."""

    pass


@dataclass(frozen=True)
class AdminCredential:
    """Credential presented with an admin request."""

    password: str | None = None
    token: str | None = None

    def __bool__(self) -> bool:
        return bool(self.password or self.token)


class AdminAuthService:
    """Verifies the shared admin secret and admin session tokens."""

    JWT_ALGORITHM = "HS256"
    SESSION_EXPIRATION_HOURS = 12
    SESSION_SUBJECT = "admin"

    def __init__(
        self, admin_password: str | None = None, session_secret: str | None = None
    ):
        """Initialize the auth service.

        Args:
            admin_password: The shared admin secret. When unset no
                password ever authorizes.
            session_secret: Secret for signing session tokens
        """
        self.admin_password = (
            admin_password
            if admin_password is not None
            else os.environ.get("ADMIN_PASSWORD")
        )
        self.session_secret = session_secret or os.environ.get(
            "ADMIN_SESSION_SECRET", "dev-secret-change-in-prod"
        )

    def verify_password(self, password: str | None) -> bool:
        """Compare a password against the admin secret in constant time."""
        if not self.admin_password or not isinstance(password, str):
            return False
        return hmac.compare_digest(
            password.encode("utf-8"), self.admin_password.encode("utf-8")
        )

    def create_session_token(self) -> dict[str, str | int]:
        """Create a signed admin session token."""
        now = datetime.now(UTC)
        payload = {
            "sub": self.SESSION_SUBJECT,
            "type": "admin_session",
            "iat": now,
            "exp": now + timedelta(hours=self.SESSION_EXPIRATION_HOURS),
        }
        token = jwt.encode(payload, self.session_secret, algorithm=self.JWT_ALGORITHM)
        return {
            "token": token,
            "token_type": "Bearer",
            "expires_in": self.SESSION_EXPIRATION_HOURS * 3600,
        }

    def verify_session_token(self, token: str) -> None:
        """Verify an admin session token.

        Raises:
            AuthorizationError: If the token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.session_secret,
                algorithms=[self.JWT_ALGORITHM],
                options={"verify_exp": True},
            )
        except ExpiredSignatureError:
            raise AuthorizationError("Session has expired")
        except JWTError as e:
            raise AuthorizationError(f"Invalid session token: {str(e)}")

        if (
            payload.get("type") != "admin_session"
            or payload.get("sub") != self.SESSION_SUBJECT
        ):
            raise AuthorizationError("Invalid token type")

    def authorize(self, credential: AdminCredential | None) -> None:
        """Check that a credential grants admin access.

        A valid session token or the correct password is accepted.

        Raises:
            AuthorizationError: If neither is valid
        """
        if not credential:
            raise AuthorizationError("Unauthorized")

        if credential.token:
            try:
                self.verify_session_token(credential.token)
                return
            except AuthorizationError:
                if not credential.password:
                    raise

        if not self.verify_password(credential.password):
            raise AuthorizationError("Unauthorized")
