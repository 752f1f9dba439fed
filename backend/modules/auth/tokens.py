"""
Single-use token issuance and redemption.

Verification and reset secrets are 256-bit URL-safe strings looked up
by value. Two-factor codes are six digits, so they are only looked up
together with the email they were sent to.
"""

import logging
import secrets
from typing import Optional

from shared.clock import Clock, SystemClock

from .exceptions import TokenExpiredError, TokenNotFoundError
from .interfaces import ITokenStore
from .models import TOKEN_TTLS, Token, TokenKind

logger = logging.getLogger(__name__)

URLSAFE_TOKEN_BYTES = 32
TWO_FACTOR_CODE_DIGITS = 6


def generate_secret(kind: TokenKind) -> str:
    """Generate a fresh unpredictable secret for a token kind."""
    if kind == TokenKind.TWO_FACTOR_CODE:
        upper = 10**TWO_FACTOR_CODE_DIGITS
        return f"{secrets.randbelow(upper):0{TWO_FACTOR_CODE_DIGITS}d}"
    return secrets.token_urlsafe(URLSAFE_TOKEN_BYTES)


class TokenIssuer:
    """
    Creates, looks up and consumes single-use tokens.

    Redemption is split in two steps: redeem() finds and checks the
    token, consume() deletes it. Callers consume only after the state
    change the token authorises has been applied.
    """

    def __init__(self, store: ITokenStore, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or SystemClock()

    def issue(self, kind: TokenKind, email: str) -> str:
        """
        Issue a token, superseding any live token of the same kind for email.

        Args:
            kind: What the token authorises
            email: Address the token is bound to

        Returns:
            The secret, to be handed to the notifier and nowhere else
        """
        secret = generate_secret(kind)
        expires_at = self._clock.now() + TOKEN_TTLS[kind]
        self._store.replace(kind, email, secret, expires_at)
        logger.info(f"Issued {kind.value} token for {email}, expires {expires_at.isoformat()}")
        return secret

    def redeem(
        self,
        kind: TokenKind,
        secret: str,
        email: Optional[str] = None,
    ) -> Token:
        """
        Look up a presented token and check its expiry.

        An expired token is reported but left in storage; it is removed
        only by a later issuance for the same email.

        Args:
            kind: Expected token kind
            secret: Presented secret or code
            email: Required for two-factor codes, ignored otherwise

        Returns:
            The live token

        Raises:
            TokenNotFoundError: If nothing matches
            TokenExpiredError: If the match is past its expiry
        """
        if not secret:
            raise TokenNotFoundError(kind.value)

        if kind == TokenKind.TWO_FACTOR_CODE:
            if not email:
                raise ValueError("Two-factor codes are redeemed by email and code")
            token = self._store.find_by_email_and_secret(kind, email, secret)
        else:
            token = self._store.find_by_secret(kind, secret)

        if token is None:
            raise TokenNotFoundError(kind.value)

        if token.is_expired(self._clock.now()):
            raise TokenExpiredError(kind.value)

        return token

    def consume(self, token: Token) -> None:
        """
        Delete a redeemed token.

        Raises:
            TokenNotFoundError: If another request consumed or replaced it first
        """
        if not self._store.delete(token):
            raise TokenNotFoundError(token.kind.value)
        logger.debug(f"Consumed {token.kind.value} token for {token.email}")
