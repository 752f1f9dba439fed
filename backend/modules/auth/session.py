"""
Session token issuance and verification.

Sessions are HS256 JWTs with a fixed 30 minute lifetime and no refresh
or revocation: expiry is the only way a session ends.
"""

import jwt

from shared.clock import Clock
from shared.config import Settings

from .exceptions import ExpiredSessionError, InvalidSessionError, MissingSessionError
from .models import SESSION_TTL, SessionClaims, User

ALGORITHM = "HS256"


class SessionIssuer:
    """Mints and checks signed session credentials."""

    def __init__(self, settings: Settings, clock: Clock):
        if not settings.secret_key:
            raise RuntimeError(
                "Session signing key missing. Set the SECRET_KEY environment variable."
            )
        self._secret = settings.secret_key
        self._clock = clock

    def issue(self, user: User) -> str:
        """Sign a session for a fully authenticated user."""
        now = self._clock.now()
        claims = SessionClaims(
            sub=user.id,
            email=user.email,
            iat=int(now.timestamp()),
            exp=int((now + SESSION_TTL).timestamp()),
        )
        return jwt.encode(claims.model_dump(), self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> SessionClaims:
        """
        Check a presented session token.

        A token is valid iff its signature verifies against the server
        secret and the clock is still before `exp`. Time claims are checked
        against the injected clock only, never by PyJWT.

        Raises:
            MissingSessionError: If no token was presented
            InvalidSessionError: If the token is malformed or badly signed
            ExpiredSessionError: If the token is past its expiry
        """
        if not token:
            raise MissingSessionError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "exp"],
                },
            )
            claims = SessionClaims(**payload)
        except jwt.InvalidTokenError as e:
            raise InvalidSessionError(f"Invalid session token: {e}")
        except ValueError:
            raise InvalidSessionError()

        if self._clock.now().timestamp() >= claims.exp:
            raise ExpiredSessionError()

        return claims
