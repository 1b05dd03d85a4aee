"""
Custom Exceptions - ABLLS Assessment Platform
ablls_platform/core/exceptions.py

Two families:
    RepositoryException  - warehouse failures (connection, query, constraint)
    ScoringException     - missing sessions/templates, wrong session state
"""


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class DatabaseConnectionException(RepositoryException):
    """Snowflake could not be reached."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class DuplicateEntityException(RepositoryException):
    """A row already exists for the given key."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class ScoringException(Exception):
    """Base exception for the scoring pipeline."""

    pass


class EntityNotFoundException(ScoringException):
    def __init__(self, entity_type: str, entity_id: str, message: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message)


class SessionNotFoundException(EntityNotFoundException):
    """Questionnaire session does not exist."""

    def __init__(self, session_id: str):
        super().__init__("Session", str(session_id), f"Session with ID {session_id} not found")


class TemplateNotFoundException(EntityNotFoundException):
    """No questionnaire template is seeded for an assessment type."""

    def __init__(self, assessment_type: str):
        super().__init__(
            "Template",
            assessment_type,
            f"Template not found for assessment type: {assessment_type}",
        )


class InvalidSessionStateException(ScoringException):
    """Session is not in the state the operation requires."""

    def __init__(self, session_id: str, status: str, message: str):
        self.session_id = str(session_id)
        self.status = status
        self.message = message
        super().__init__(message)
