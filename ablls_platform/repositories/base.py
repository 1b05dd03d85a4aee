"""
Base Repository - ABLLS Assessment Platform
ablls_platform/repositories/base.py

One connection per statement. Rows come back from a DictCursor with
Snowflake's upper-case column names; row_to_dict lower-cases them.
Connector errors are re-raised as RepositoryException subclasses so routes
never see snowflake.connector types.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Sequence

from snowflake.connector import DictCursor
from snowflake.connector.errors import Error, InterfaceError, ProgrammingError

from ablls_platform.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    RepositoryException,
)
from ablls_platform.services.snowflake import get_snowflake_connection


def translate_error(error: Error) -> RepositoryException:
    """Map a connector error onto the repository exception hierarchy."""
    if isinstance(error, InterfaceError):
        return DatabaseConnectionException(f"Snowflake unreachable: {error}")
    text = str(error)
    if isinstance(error, ProgrammingError) and ("UNIQUE" in text.upper() or "DUPLICATE" in text.upper()):
        return DuplicateEntityException(text)
    return RepositoryException(f"Snowflake query failed: {text}")


class BaseRepository:

    @contextmanager
    def get_cursor(self) -> Iterator[DictCursor]:
        try:
            conn = get_snowflake_connection()
        except Error as e:
            raise DatabaseConnectionException(f"Snowflake unreachable: {e}") from e
        try:
            cursor = conn.cursor(DictCursor)
            try:
                yield cursor
            finally:
                cursor.close()
        finally:
            conn.close()

    def execute_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Any:
        """
        Run one statement.

        Returns:
            a row dict (fetch_one), a list of row dicts (fetch_all),
            otherwise the affected row count
        """
        with self.get_cursor() as cursor:
            try:
                cursor.execute(sql, tuple(params or ()))
                if commit:
                    cursor.connection.commit()
                if fetch_one:
                    return cursor.fetchone()
                if fetch_all:
                    return cursor.fetchall()
                return cursor.rowcount
            except Error as e:
                raise translate_error(e) from e

    @staticmethod
    def normalize_timestamp(dt: Optional[datetime]) -> Optional[datetime]:
        # naive values are UTC
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def row_to_dict(row: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {k.lower(): v for k, v in (row or {}).items()}
