"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication — the
server keeps no session table, it just checks the signature.

Tokens carry the user id (as the standard "sub" claim), the email, and
iat/exp. Expiry is enforced with a small leeway for clock skew between
hosts. The codec is built once per app from Settings, so the signing
secret is injected rather than read from a global.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from gamehound.config import Settings


class TokenError(Exception):
    """Raised when token verification fails."""


@dataclass(frozen=True)
class Identity:
    """The verified claims of a bearer token."""

    user_id: int
    email: str
    issued_at: Optional[datetime] = None


class TokenCodec:
    """Issues and verifies signed access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
        leeway_seconds: int = 30,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.leeway_seconds = leeway_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
            leeway_seconds=settings.jwt_leeway_seconds,
        )

    def issue(
        self,
        user_id: int,
        email: str,
        expires_minutes: Optional[int] = None,
    ) -> str:
        """Create a signed access token for a user."""
        now = datetime.now(timezone.utc)
        expires = now + timedelta(minutes=expires_minutes or self.expire_minutes)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": now,
            "exp": expires,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """Verify and decode a token.

        Returns the Identity on success. Raises TokenError on a bad
        signature, an expired token, or a payload missing sub/email.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                leeway=self.leeway_seconds,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

        try:
            user_id = int(payload["sub"])
            email = str(payload["email"])
        except (KeyError, TypeError, ValueError):
            raise TokenError("Invalid token: malformed claims")

        issued_at = None
        if "iat" in payload:
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
        return Identity(user_id=user_id, email=email, issued_at=issued_at)
