"""
Authentication module data models.

These models define the identity records, single-use tokens and
session claims used by the auth flows, plus the request and response
shapes of the public operations.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class TokenKind(str, Enum):
    """Purpose a single-use token is bound to."""

    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"
    TWO_FACTOR_CODE = "two_factor_code"


# Lifetime of each token kind. Policy, not configurable per call.
TOKEN_TTLS: dict[TokenKind, timedelta] = {
    TokenKind.EMAIL_VERIFICATION: timedelta(hours=1),
    TokenKind.PASSWORD_RESET: timedelta(hours=1),
    TokenKind.TWO_FACTOR_CODE: timedelta(minutes=5),
}

SESSION_TTL = timedelta(minutes=30)


class User(BaseModel):
    """
    Identity record.

    Stores hand out fresh copies; mutations go through the store and
    return the updated record.
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address, unique, stored as given")
    display_name: str = Field(..., description="Display name")
    password_hash: str = Field(..., description="Salted password hash")
    email_verified: bool = Field(default=False)
    two_factor_enabled: bool = Field(default=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}


class Token(BaseModel):
    """
    Single-use, time-bounded credential bound to one email address.

    `id` changes on every issuance, so deleting by id only ever removes
    the exact token that was redeemed.
    """

    id: str
    kind: TokenKind
    email: str
    secret: str
    expires_at: datetime
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}

    def is_expired(self, now: datetime) -> bool:
        """A token is expired strictly after its expiry instant."""
        return now > self.expires_at


class SessionClaims(BaseModel):
    """Claims carried by a signed session token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: str = Field(..., description="User's email")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")


class UserProfile(BaseModel):
    """Public view of a user, safe to return to its owner."""

    id: str
    email: str
    name: str
    email_verified: bool
    two_factor_enabled: bool

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            name=user.display_name,
            email_verified=user.email_verified,
            two_factor_enabled=user.two_factor_enabled,
        )


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    email: str = ""
    name: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class VerifyTwoFactorRequest(BaseModel):
    email: str = ""
    password: str = ""
    code: str = ""


class ForgotPasswordRequest(BaseModel):
    email: str = ""


class ResetPasswordRequest(BaseModel):
    token: str = ""
    password: str = ""


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Confirmation message."""

    message: str


class SessionResponse(BaseModel):
    """Issued session credential."""

    access_token: str
    token_type: str = "bearer"


class TwoFactorChallenge(BaseModel):
    """Login succeeded on password but needs the emailed code."""

    two_factor_required: bool = True


class TwoFactorStatus(BaseModel):
    two_factor_enabled: bool
    message: str
