"""
Template Repository - ABLLS Assessment Platform
ablls_platform/repositories/template_repository.py

Read access to questionnaire templates, domains and questions.
"""

import json
from typing import Any, Dict, List, Optional

from ablls_platform.models.template import (
    Domain,
    DomainSummary,
    Question,
    Template,
    TemplateSummary,
)
from ablls_platform.repositories.base import BaseRepository


class TemplateRepository(BaseRepository):
    """Repository for questionnaire templates."""

    TABLE_NAME = "QUESTIONNAIRE_TEMPLATES"

    def list_templates(self) -> List[TemplateSummary]:
        """
        List all templates with per-domain question counts.

        Returns:
            Template summaries ordered by assessment type
        """
        sql = """
            SELECT t.ID AS TEMPLATE_ID, t.ASSESSMENT_TYPE, t.TITLE, t.DESCRIPTION,
                   d.ID AS DOMAIN_ID, d.NAME AS DOMAIN_NAME, d.SORT_ORDER,
                   COUNT(q.ID) AS QUESTION_COUNT
            FROM QUESTIONNAIRE_TEMPLATES t
            LEFT JOIN TEMPLATE_DOMAINS d ON d.TEMPLATE_ID = t.ID
            LEFT JOIN TEMPLATE_QUESTIONS q ON q.DOMAIN_ID = d.ID
            GROUP BY t.ID, t.ASSESSMENT_TYPE, t.TITLE, t.DESCRIPTION,
                     d.ID, d.NAME, d.SORT_ORDER
            ORDER BY t.ASSESSMENT_TYPE, d.SORT_ORDER
        """
        rows = self.execute_query(sql, fetch_all=True) or []

        summaries: Dict[str, Dict[str, Any]] = {}
        for raw in rows:
            row = self.row_to_dict(raw)
            entry = summaries.setdefault(row["template_id"], {
                "id": row["template_id"],
                "assessment_type": row["assessment_type"],
                "title": row.get("title"),
                "description": row.get("description"),
                "domains": [],
            })
            if row.get("domain_id"):
                entry["domains"].append(DomainSummary(
                    id=row["domain_id"],
                    name=row["domain_name"],
                    question_count=int(row.get("question_count") or 0),
                ))

        return [
            TemplateSummary(
                total_questions=sum(d.question_count for d in entry["domains"]),
                **entry,
            )
            for entry in summaries.values()
        ]

    def get_by_assessment_type(self, assessment_type: str) -> Optional[Template]:
        """
        Load a full template with domains and questions in sort order.

        Args:
            assessment_type: e.g. "ABLLS-R"

        Returns:
            Template or None if not seeded
        """
        header = self.execute_query(
            """
            SELECT ID, ASSESSMENT_TYPE, TITLE, DESCRIPTION
            FROM QUESTIONNAIRE_TEMPLATES
            WHERE ASSESSMENT_TYPE = %s
            """,
            (assessment_type,),
            fetch_one=True,
        )
        if not header:
            return None
        header = self.row_to_dict(header)

        rows = self.execute_query(
            """
            SELECT d.ID AS DOMAIN_ID, d.NAME AS DOMAIN_NAME, d.CODE AS DOMAIN_CODE,
                   d.SORT_ORDER AS DOMAIN_SORT_ORDER,
                   q.ID AS QUESTION_ID, q.SKILL_CODE, q.TASK_NAME, q.QUESTION_TEXT,
                   q.OPTIONS, q.SCORE_TYPE, q.SORT_ORDER AS QUESTION_SORT_ORDER
            FROM TEMPLATE_DOMAINS d
            LEFT JOIN TEMPLATE_QUESTIONS q ON q.DOMAIN_ID = d.ID
            WHERE d.TEMPLATE_ID = %s
            ORDER BY d.SORT_ORDER, q.SORT_ORDER
            """,
            (header["id"],),
            fetch_all=True,
        ) or []

        domains: Dict[str, Domain] = {}
        for raw in rows:
            row = self.row_to_dict(raw)
            domain = domains.get(row["domain_id"])
            if domain is None:
                domain = Domain(
                    id=row["domain_id"],
                    name=row["domain_name"],
                    code=row.get("domain_code"),
                    sort_order=row.get("domain_sort_order") or 0,
                )
                domains[row["domain_id"]] = domain
            if row.get("question_id"):
                domain.questions.append(self._row_to_question(row))

        return Template(
            id=header["id"],
            assessment_type=header["assessment_type"],
            title=header.get("title"),
            description=header.get("description"),
            domains=list(domains.values()),
        )

    def _row_to_question(self, row: Dict[str, Any]) -> Question:
        return Question(
            id=row["question_id"],
            skill_code=row.get("skill_code"),
            task_name=row.get("task_name"),
            question_text=row.get("question_text") or "",
            options=self._parse_options(row.get("options")),
            score_type=row.get("score_type"),
            sort_order=row.get("question_sort_order") or 0,
        )

    @staticmethod
    def _parse_options(value: Any) -> List[str]:
        """VARIANT arrays come back from the connector as JSON text."""
        if value is None:
            return []
        if isinstance(value, str):
            value = json.loads(value) if value.strip() else []
        return [str(option) for option in value]
