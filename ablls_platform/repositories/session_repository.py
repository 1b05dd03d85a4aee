"""
Session Repository - ABLLS Assessment Platform
ablls_platform/repositories/session_repository.py

Data access layer for questionnaire sessions and their answers.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ablls_platform.models.enumerations import SessionStatus
from ablls_platform.models.session import Answer, SessionListItem, SessionResponse
from ablls_platform.repositories.base import BaseRepository


class SessionRepository(BaseRepository):
    """Repository for questionnaire session operations."""

    TABLE_NAME = "QUESTIONNAIRE_SESSIONS"

    _SESSION_COLUMNS = """
        ID, ASSESSMENT_TYPE, CHILD_ID, CHILD_NAME, RESPONDENT_ID,
        STATUS, CREATED_AT, COMPLETED_AT
    """

    def create(
        self,
        assessment_type: str,
        child_id: str,
        respondent_id: str,
        child_name: Optional[str] = None,
    ) -> Optional[SessionResponse]:
        """
        Create a new in-progress session unless one already exists for
        (assessment_type, child_id).

        Args:
            assessment_type: Assessment type value (e.g. "ABLLS-R")
            child_id: Child identifier
            respondent_id: Parent/clinician filling in the questionnaire
            child_name: Optional display name

        Returns:
            Created session, or None when an in-progress session was found

        The existence check and the insert are one statement, which narrows
        but does not close the window between two concurrent starts:
        Snowflake does not enforce UNIQUE, so a duplicate is still possible
        under simultaneous commits.
        """
        session_id = str(uuid4())
        now = datetime.now(timezone.utc)
        in_progress = SessionStatus.IN_PROGRESS.value

        sql = """
            INSERT INTO QUESTIONNAIRE_SESSIONS (ID, ASSESSMENT_TYPE, CHILD_ID, CHILD_NAME,
                                                RESPONDENT_ID, STATUS, CREATED_AT, COMPLETED_AT)
            SELECT %s, %s, %s, %s, %s, %s, %s, NULL
            WHERE NOT EXISTS (
                SELECT 1 FROM QUESTIONNAIRE_SESSIONS
                WHERE ASSESSMENT_TYPE = %s AND CHILD_ID = %s AND STATUS = %s
            )
        """
        params = (
            session_id,
            assessment_type,
            child_id,
            child_name,
            respondent_id,
            in_progress,
            now,
            assessment_type,
            child_id,
            in_progress,
        )
        inserted = self.execute_query(sql, params, commit=True)
        if not inserted:
            return None

        return self.get_by_id(session_id)

    def get_by_id(self, session_id: str) -> Optional[SessionResponse]:
        """
        Retrieve a session with all stored answers.

        Returns:
            Session or None if not found
        """
        sql = f"""
            SELECT {self._SESSION_COLUMNS}
            FROM QUESTIONNAIRE_SESSIONS
            WHERE ID = %s
        """
        row = self.execute_query(sql, (str(session_id),), fetch_one=True)
        if not row:
            return None

        return self._to_session(self.row_to_dict(row), self.get_responses(session_id))

    def find_in_progress(self, assessment_type: str, child_id: str) -> Optional[SessionResponse]:
        """Return the in-progress session for (assessment_type, child_id), if any."""
        sql = f"""
            SELECT {self._SESSION_COLUMNS}
            FROM QUESTIONNAIRE_SESSIONS
            WHERE ASSESSMENT_TYPE = %s AND CHILD_ID = %s AND STATUS = %s
            ORDER BY CREATED_AT DESC
            LIMIT 1
        """
        row = self.execute_query(
            sql,
            (assessment_type, child_id, SessionStatus.IN_PROGRESS.value),
            fetch_one=True,
        )
        if not row:
            return None

        data = self.row_to_dict(row)
        return self._to_session(data, self.get_responses(data["id"]))

    def list_sessions(
        self,
        child_id: Optional[str] = None,
        assessment_type: Optional[str] = None,
    ) -> List[SessionListItem]:
        """
        List sessions newest first, with response counts.

        Args:
            child_id: Optional filter by child
            assessment_type: Optional filter by assessment type
        """
        where_clauses = ["1=1"]
        params: List[Any] = []

        if child_id:
            where_clauses.append("s.CHILD_ID = %s")
            params.append(child_id)

        if assessment_type:
            where_clauses.append("s.ASSESSMENT_TYPE = %s")
            params.append(assessment_type)

        sql = f"""
            SELECT s.ID, s.ASSESSMENT_TYPE, s.CHILD_ID, s.RESPONDENT_ID, s.STATUS,
                   s.CREATED_AT, s.COMPLETED_AT, COUNT(r.ID) AS RESPONSE_COUNT
            FROM QUESTIONNAIRE_SESSIONS s
            LEFT JOIN SESSION_RESPONSES r ON r.SESSION_ID = s.ID
            WHERE {" AND ".join(where_clauses)}
            GROUP BY s.ID, s.ASSESSMENT_TYPE, s.CHILD_ID, s.RESPONDENT_ID, s.STATUS,
                     s.CREATED_AT, s.COMPLETED_AT
            ORDER BY s.CREATED_AT DESC
        """
        rows = self.execute_query(sql, tuple(params), fetch_all=True) or []

        items = []
        for raw in rows:
            row = self.row_to_dict(raw)
            items.append(SessionListItem(
                id=row["id"],
                assessment_type=row["assessment_type"],
                child_id=row["child_id"],
                respondent_id=row.get("respondent_id"),
                status=row["status"],
                created_at=self.normalize_timestamp(row["created_at"]),
                completed_at=self.normalize_timestamp(row.get("completed_at")),
                response_count=int(row.get("response_count") or 0),
            ))
        return items

    def get_responses(self, session_id: str) -> List[Answer]:
        sql = """
            SELECT QUESTION_ID, ANSWER, UPDATED_AT
            FROM SESSION_RESPONSES
            WHERE SESSION_ID = %s
            ORDER BY CREATED_AT
        """
        rows = self.execute_query(sql, (str(session_id),), fetch_all=True) or []
        answers = []
        for raw in rows:
            row = self.row_to_dict(raw)
            answers.append(Answer(
                question_id=row["question_id"],
                answer=row["answer"],
                updated_at=self.normalize_timestamp(row.get("updated_at")),
            ))
        return answers

    def upsert_response(self, session_id: str, question_id: str, answer: str) -> Answer:
        """
        Insert or replace the answer for (session_id, question_id).

        The MERGE keeps at most one row per pair.
        """
        now = datetime.now(timezone.utc)
        sql = """
            MERGE INTO SESSION_RESPONSES t
            USING (SELECT %s AS SESSION_ID, %s AS QUESTION_ID, %s AS ANSWER) s
            ON t.SESSION_ID = s.SESSION_ID AND t.QUESTION_ID = s.QUESTION_ID
            WHEN MATCHED THEN UPDATE SET ANSWER = s.ANSWER, UPDATED_AT = %s
            WHEN NOT MATCHED THEN INSERT (ID, SESSION_ID, QUESTION_ID, ANSWER, CREATED_AT, UPDATED_AT)
                VALUES (%s, s.SESSION_ID, s.QUESTION_ID, s.ANSWER, %s, %s)
        """
        params = (
            str(session_id),
            question_id,
            answer,
            now,
            str(uuid4()),
            now,
            now,
        )
        self.execute_query(sql, params, commit=True)

        return Answer(question_id=question_id, answer=answer, updated_at=now)

    def mark_completed(self, session_id: str, completed_at: datetime) -> Optional[SessionResponse]:
        """Transition a session to completed and stamp completed_at."""
        sql = """
            UPDATE QUESTIONNAIRE_SESSIONS
            SET STATUS = %s, COMPLETED_AT = %s
            WHERE ID = %s
        """
        self.execute_query(
            sql,
            (SessionStatus.COMPLETED.value, completed_at, str(session_id)),
            commit=True,
        )
        return self.get_by_id(session_id)

    def _to_session(self, row: Dict[str, Any], responses: List[Answer]) -> SessionResponse:
        return SessionResponse(
            id=row["id"],
            assessment_type=row["assessment_type"],
            child_id=row["child_id"],
            child_name=row.get("child_name"),
            respondent_id=row.get("respondent_id"),
            status=row["status"],
            created_at=self.normalize_timestamp(row["created_at"]),
            completed_at=self.normalize_timestamp(row.get("completed_at")),
            responses=responses,
        )
