"""
Credential and token stores.

In-memory implementations serve tests and local development; the
Supabase implementations persist to the `users` and `auth_tokens`
tables created by migrations/001_create_auth_tables.sql.
"""

import threading
import uuid
from datetime import datetime
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.clock import Clock, SystemClock
from shared.repository import BaseRepository

from .exceptions import DuplicateEmailError
from .interfaces import ICredentialStore, ITokenStore
from .models import Token, TokenKind, User
from .passwords import verify_password

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class InMemoryCredentialStore(ICredentialStore):
    """
    Credential store kept in process memory.

    A lock serializes every read-modify-write so the uniqueness check
    and insert in create() cannot interleave.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        self._ids_by_email: dict[str, str] = {}

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            return self._users.get(user_id) if user_id else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def create(self, email: str, display_name: str, password_hash: str) -> User:
        with self._lock:
            if email in self._ids_by_email:
                raise DuplicateEmailError(email)
            now = self._clock.now()
            user = User(
                id=str(uuid.uuid4()),
                email=email,
                display_name=display_name,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._ids_by_email[email] = user.id
            return user

    def verify_password(self, user: User, plaintext: str) -> bool:
        return verify_password(plaintext, user.password_hash)

    def _update(self, user: User, **changes: Any) -> User:
        with self._lock:
            current = self._users[user.id]
            updated = current.model_copy(
                update={**changes, "updated_at": self._clock.now()}
            )
            self._users[user.id] = updated
            return updated

    def mark_email_verified(self, user: User) -> User:
        return self._update(user, email_verified=True)

    def set_password_hash(self, user: User, new_hash: str) -> User:
        return self._update(user, password_hash=new_hash)

    def set_two_factor_enabled(self, user: User, enabled: bool) -> User:
        return self._update(user, two_factor_enabled=enabled)


class InMemoryTokenStore(ITokenStore):
    """
    Token store kept in process memory.

    Tokens are keyed by (kind, email), which enforces one live token
    per pair; replace() and delete() run under a single lock.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._tokens: dict[tuple[TokenKind, str], Token] = {}

    def replace(
        self,
        kind: TokenKind,
        email: str,
        secret: str,
        expires_at: datetime,
    ) -> Token:
        token = Token(
            id=str(uuid.uuid4()),
            kind=kind,
            email=email,
            secret=secret,
            expires_at=expires_at,
            created_at=self._clock.now(),
        )
        with self._lock:
            self._tokens[(kind, email)] = token
        return token

    def find_by_secret(self, kind: TokenKind, secret: str) -> Optional[Token]:
        with self._lock:
            for (token_kind, _), token in self._tokens.items():
                if token_kind == kind and token.secret == secret:
                    return token
        return None

    def find_by_email_and_secret(
        self, kind: TokenKind, email: str, secret: str
    ) -> Optional[Token]:
        with self._lock:
            token = self._tokens.get((kind, email))
        if token is not None and token.secret == secret:
            return token
        return None

    def delete(self, token: Token) -> bool:
        key = (token.kind, token.email)
        with self._lock:
            current = self._tokens.get(key)
            if current is None or current.id != token.id:
                return False
            del self._tokens[key]
            return True

    def count(self, kind: Optional[TokenKind] = None, email: Optional[str] = None) -> int:
        """Number of stored tokens matching the filters."""
        with self._lock:
            return sum(
                1
                for (token_kind, token_email) in self._tokens
                if (kind is None or token_kind == kind)
                and (email is None or token_email == email)
            )


class SupabaseCredentialStore(BaseRepository[User]):
    """
    Credential store backed by the Supabase `users` table.

    Email uniqueness is enforced by the table's unique index; a
    unique-violation on insert becomes DuplicateEmailError.
    """

    table = "users"

    def __init__(self, db: Client, clock: Optional[Clock] = None) -> None:
        super().__init__(db)
        self._clock = clock or SystemClock()

    def find_by_email(self, email: str) -> Optional[User]:
        result = self._table().select("*").eq("email", email).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def find_by_id(self, user_id: str) -> Optional[User]:
        result = self._table().select("*").eq("id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def create(self, email: str, display_name: str, password_hash: str) -> User:
        now = self._clock.now().isoformat()
        data = {
            "id": str(uuid.uuid4()),
            "email": email,
            "display_name": display_name,
            "password_hash": password_hash,
            "email_verified": False,
            "two_factor_enabled": False,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self._table().insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateEmailError(email) from e
            raise
        return self._map_to_user(result.data[0])

    def verify_password(self, user: User, plaintext: str) -> bool:
        return verify_password(plaintext, user.password_hash)

    def _update(self, user: User, changes: dict[str, Any]) -> User:
        changes["updated_at"] = self._clock.now().isoformat()
        result = self._table().update(changes).eq("id", user.id).execute()
        return self._map_to_user(result.data[0])

    def mark_email_verified(self, user: User) -> User:
        return self._update(user, {"email_verified": True})

    def set_password_hash(self, user: User, new_hash: str) -> User:
        return self._update(user, {"password_hash": new_hash})

    def set_two_factor_enabled(self, user: User, enabled: bool) -> User:
        return self._update(user, {"two_factor_enabled": enabled})

    def _map_to_user(self, row: dict[str, Any]) -> User:
        return User(
            id=str(row["id"]),
            email=row["email"],
            display_name=row["display_name"],
            password_hash=row["password_hash"],
            email_verified=bool(row.get("email_verified", False)),
            two_factor_enabled=bool(row.get("two_factor_enabled", False)),
            created_at=_parse_timestamp(row.get("created_at")),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )


class SupabaseTokenStore(BaseRepository[Token]):
    """
    Token store backed by the Supabase `auth_tokens` table.

    The unique (kind, email) index plus upsert makes replacement a
    single statement. delete() filters on the row id and checks the
    returned rows, so two concurrent redemptions cannot both succeed.
    """

    table = "auth_tokens"

    def __init__(self, db: Client, clock: Optional[Clock] = None) -> None:
        super().__init__(db)
        self._clock = clock or SystemClock()

    def replace(
        self,
        kind: TokenKind,
        email: str,
        secret: str,
        expires_at: datetime,
    ) -> Token:
        data = {
            "id": str(uuid.uuid4()),
            "kind": kind.value,
            "email": email,
            "secret": secret,
            "expires_at": expires_at.isoformat(),
            "created_at": self._clock.now().isoformat(),
        }
        result = self._table().upsert(data, on_conflict="kind,email").execute()
        return self._map_to_token(result.data[0])

    def find_by_secret(self, kind: TokenKind, secret: str) -> Optional[Token]:
        result = (
            self._table()
            .select("*")
            .eq("kind", kind.value)
            .eq("secret", secret)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_token(result.data[0])

    def find_by_email_and_secret(
        self, kind: TokenKind, email: str, secret: str
    ) -> Optional[Token]:
        result = (
            self._table()
            .select("*")
            .eq("kind", kind.value)
            .eq("email", email)
            .eq("secret", secret)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_token(result.data[0])

    def delete(self, token: Token) -> bool:
        result = self._table().delete().eq("id", token.id).execute()
        return bool(result.data)

    def _map_to_token(self, row: dict[str, Any]) -> Token:
        return Token(
            id=str(row["id"]),
            kind=TokenKind(row["kind"]),
            email=row["email"],
            secret=row["secret"],
            expires_at=_parse_timestamp(row["expires_at"]),
            created_at=_parse_timestamp(row.get("created_at")),
        )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp from PostgREST, accepting the trailing 'Z' form."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
