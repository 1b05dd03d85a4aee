"""
Repositories Package - ABLLS Assessment Platform
ablls_platform/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from ablls_platform.repositories.base import BaseRepository
from ablls_platform.repositories.session_repository import SessionRepository
from ablls_platform.repositories.template_repository import TemplateRepository

__all__ = [
    "BaseRepository",
    "SessionRepository",
    "TemplateRepository",
]
