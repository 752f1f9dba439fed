"""
Base repository class for database access.

Provides a common abstraction layer for Supabase-backed stores,
encapsulating client access and the table each store owns.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all Supabase repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class SupabaseCredentialStore(BaseRepository[User]):
            table = "users"

            def find_by_email(self, email: str) -> Optional[User]:
                result = self._table().select("*").eq("email", email).execute()
                if not result.data:
                    return None
                return self._map_to_user(result.data[0])
    """

    table: str = ""

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _table(self):
        """Query builder for the table this repository owns."""
        return self._db.table(self.table)
