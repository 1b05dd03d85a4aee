"""
Snowflake Connection Factory
ablls_platform/services/snowflake.py

Module-level connection factory used by repositories and the seed script.
"""
import snowflake.connector

from ablls_platform.config import settings
from ablls_platform.core.exceptions import DatabaseConnectionException


def get_snowflake_connection():
    """
    Open a new Snowflake connection from application settings.

    Callers own the connection and must close it.

    Raises:
        DatabaseConnectionException: account, user or password is not set
    """
    if not settings.snowflake_configured:
        raise DatabaseConnectionException("Snowflake credentials are not configured")
    return snowflake.connector.connect(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        password=settings.SNOWFLAKE_PASSWORD.get_secret_value(),
        warehouse=settings.SNOWFLAKE_WAREHOUSE,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
        role=settings.SNOWFLAKE_ROLE,
    )
