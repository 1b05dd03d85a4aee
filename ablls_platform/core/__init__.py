"""
Core Package - ABLLS Assessment Platform
ablls_platform/core/__init__.py

Exception hierarchy. Dependency factories live in core.dependencies.
"""

from ablls_platform.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    InvalidSessionStateException,
    RepositoryException,
    ScoringException,
    SessionNotFoundException,
    TemplateNotFoundException,
)

__all__ = [
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "InvalidSessionStateException",
    "RepositoryException",
    "ScoringException",
    "SessionNotFoundException",
    "TemplateNotFoundException",
]
