import pytest
from datetime import datetime, timedelta, timezone

from modules.auth.models import (
    SESSION_TTL,
    TOKEN_TTLS,
    SessionClaims,
    Token,
    TokenKind,
    User,
    UserProfile,
)


def make_user(**overrides) -> User:
    data = {
        "id": "user-123",
        "email": "ann@example.com",
        "display_name": "Ann",
        "password_hash": "hash",
    }
    data.update(overrides)
    return User(**data)


class TestUser:
    def test_defaults(self):
        """New users should be unverified without 2FA."""
        user = make_user()
        assert user.email_verified is False
        assert user.two_factor_enabled is False

    def test_user_is_immutable(self):
        """User should be immutable."""
        user = make_user()
        with pytest.raises(Exception):  # Pydantic ValidationError
            user.email_verified = True


class TestTokenPolicy:
    def test_link_tokens_last_an_hour(self):
        assert TOKEN_TTLS[TokenKind.EMAIL_VERIFICATION] == timedelta(hours=1)
        assert TOKEN_TTLS[TokenKind.PASSWORD_RESET] == timedelta(hours=1)

    def test_two_factor_codes_last_five_minutes(self):
        assert TOKEN_TTLS[TokenKind.TWO_FACTOR_CODE] == timedelta(minutes=5)

    def test_every_kind_has_a_ttl(self):
        assert set(TOKEN_TTLS) == set(TokenKind)

    def test_session_lasts_thirty_minutes(self):
        assert SESSION_TTL == timedelta(minutes=30)


class TestToken:
    @pytest.fixture
    def token(self):
        return Token(
            id="tok-1",
            kind=TokenKind.PASSWORD_RESET,
            email="ann@example.com",
            secret="abc",
            expires_at=datetime(2025, 1, 1, 1, 0, tzinfo=timezone.utc),
        )

    def test_not_expired_before_expiry(self, token):
        assert not token.is_expired(token.expires_at - timedelta(seconds=1))

    def test_not_expired_at_expiry_instant(self, token):
        """The expiry instant itself is still valid."""
        assert not token.is_expired(token.expires_at)

    def test_expired_one_second_after(self, token):
        assert token.is_expired(token.expires_at + timedelta(seconds=1))


class TestSessionClaims:
    def test_parse_claims(self):
        claims = SessionClaims(sub="user-123", email="ann@example.com", iat=1, exp=2)
        assert claims.sub == "user-123"
        assert claims.model_dump() == {
            "sub": "user-123",
            "email": "ann@example.com",
            "iat": 1,
            "exp": 2,
        }


class TestUserProfile:
    def test_from_user_hides_password_hash(self):
        """UserProfile should expose the user without the password hash."""
        profile = UserProfile.from_user(make_user(two_factor_enabled=True))
        data = profile.model_dump()
        assert data == {
            "id": "user-123",
            "email": "ann@example.com",
            "name": "Ann",
            "email_verified": False,
            "two_factor_enabled": True,
        }
        assert "password_hash" not in data
