# ablls_platform/scoring/grading_calculator.py
"""
VB Grading Calculator
---------------------
Aggregates a completed session's free-text answers into per-domain and
overall scores.

Per question:
    answer      = stored answer or "Not answered"
    raw         = leading integer of the answer (0 if none)
    max         = "0-N" score type | len(options) - 1 | 4
    score       = clamp(raw, 0, max)
    vb          = map_question_to_vb(skill_code or id, raw, max)

Per domain:
    raw_score    = Σ score
    max_possible = Σ max
    percentage   = raw_score / max_possible × 100   (0 if max_possible == 0), 2dp
    proficiency  = band(unrounded percentage)

Overall:
    sums of the domain values, percentage rounded to 2dp, band(rounded percentage)

Domain and question order is taken from the template as given; the
calculator never re-sorts.
"""
import structlog
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ablls_platform.models.grading import DomainScore, QuestionScore, VBGradingResult
from ablls_platform.models.session import SessionResponse
from ablls_platform.models.template import Domain, Template
from ablls_platform.scoring.answer_parser import (
    NOT_ANSWERED,
    clamp_numeric_score,
    extract_numeric_score,
    resolve_max_score,
)
from ablls_platform.scoring.proficiency import get_proficiency_level
from ablls_platform.scoring.utils import ratio_percentage, round_percentage
from ablls_platform.scoring.vb_mapping import (
    VBMappingResult,
    map_question_to_vb,
    render_vb_bar,
    to_vb_export_rows,
)

logger = structlog.get_logger(__name__)


def resolve_domain_code(domain: Domain) -> str:
    """Explicit seeded code when present, else the first character of the name."""
    if domain.code and domain.code.strip():
        return domain.code.strip()
    return domain.name[:1]


class GradingCalculator:
    """Build a VBGradingResult from a session and its template."""

    def calculate(
        self,
        session: SessionResponse,
        template: Template,
        child_name: Optional[str] = None,
    ) -> VBGradingResult:
        """
        Args:
            session: Completed session with its stored answers.
            template: Template for the session's assessment type, domains and
                      questions already in persisted sort order.
            child_name: Optional display name; falls back to session.child_name.

        Returns:
            VBGradingResult with domain scores, overall score and VB export rows.
        """
        answers: Dict[str, str] = {r.question_id: r.answer for r in session.responses}

        domain_scores: List[DomainScore] = []
        vb_mappings: List[VBMappingResult] = []

        for domain in template.domains:
            domain_score = self._score_domain(domain, answers, vb_mappings)
            domain_scores.append(domain_score)

        self._flag_code_collisions(domain_scores, session.id)

        overall_score = sum(ds.raw_score for ds in domain_scores)
        overall_max = sum(ds.max_possible for ds in domain_scores)
        overall_pct = round_percentage(ratio_percentage(overall_score, overall_max))

        completed_at = session.completed_at
        if completed_at is None:
            logger.warning("session_missing_completed_at", session_id=session.id)
            completed_at = datetime.now(timezone.utc)

        result = VBGradingResult(
            session_id=session.id,
            child_id=session.child_id,
            child_name=child_name or session.child_name,
            assessment_type=template.assessment_type,
            completed_at=completed_at,
            domain_scores=domain_scores,
            overall_score=overall_score,
            overall_max_possible=overall_max,
            overall_percentage=overall_pct,
            overall_proficiency=get_proficiency_level(overall_pct),
            vb_export=to_vb_export_rows(vb_mappings),
        )

        logger.info(
            "vb_grading_calculated",
            session_id=session.id,
            assessment_type=template.assessment_type,
            domains=len(domain_scores),
            questions=len(vb_mappings),
            answered=len(answers),
            overall_score=overall_score,
            overall_max_possible=overall_max,
            overall_percentage=overall_pct,
            overall_proficiency=result.overall_proficiency.value,
        )

        return result

    def _score_domain(
        self,
        domain: Domain,
        answers: Dict[str, str],
        vb_mappings: List[VBMappingResult],
    ) -> DomainScore:
        questions: List[QuestionScore] = []
        raw_score = 0
        max_possible = 0

        for question in domain.questions:
            answer = answers.get(question.id)
            max_score = resolve_max_score(question.score_type, question.options)
            raw_numeric = extract_numeric_score(answer)
            score = clamp_numeric_score(raw_numeric, max_score)

            vb = map_question_to_vb(question.skill_code or question.id, raw_numeric, max_score)
            vb_mappings.append(vb)

            questions.append(QuestionScore(
                question_id=question.id,
                skill_code=question.skill_code or "",
                task_name=question.task_name or "",
                question_text=question.question_text or "",
                selected_answer=answer or NOT_ANSWERED,
                numeric_score=score,
                max_score=max_score,
                normalized_score=vb.normalized,
                vb_filled_cells=list(vb.filled_units),
                vb_bar=render_vb_bar(vb.filled_map),
            ))

            raw_score += score
            max_possible += max(0, max_score)

        percentage = ratio_percentage(raw_score, max_possible)

        return DomainScore(
            domain=resolve_domain_code(domain),
            domain_name=domain.name,
            raw_score=raw_score,
            max_possible=max_possible,
            percentage=round_percentage(percentage),
            proficiency=get_proficiency_level(percentage),
            question_count=len(domain.questions),
            questions=questions,
        )

    def _flag_code_collisions(self, domain_scores: List[DomainScore], session_id: str) -> None:
        counts = Counter(ds.domain for ds in domain_scores)
        ambiguous = sorted(code for code, n in counts.items() if n > 1)
        if not ambiguous:
            return
        for ds in domain_scores:
            if ds.domain in counts and counts[ds.domain] > 1:
                ds.code_ambiguous = True
        logger.warning(
            "domain_code_collision",
            session_id=session_id,
            codes=ambiguous,
            domains=[ds.domain_name for ds in domain_scores if ds.code_ambiguous],
        )
