from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from ablls_platform.models.enumerations import ProficiencyLevel
from ablls_platform.scoring.vb_mapping import VBExportRow


class QuestionScore(BaseModel):
    """
    Per-question response detail inside a domain score.
    """

    question_id: str
    skill_code: str = ""
    task_name: str = ""
    question_text: str = ""
    selected_answer: str = Field(..., description="Raw answer text, or 'Not answered'")
    numeric_score: int = Field(..., ge=0, description="Score clamped into [0, max_score]")
    max_score: int = Field(..., ge=0)
    normalized_score: int = Field(..., ge=0, le=4, description="Score on the 4-unit VB basis")
    vb_filled_cells: List[int] = Field(default_factory=list)
    vb_bar: str


class DomainScore(BaseModel):
    """
    Aggregated score for one template domain.
    """

    domain: str = Field(..., description="Short domain code")
    domain_name: str
    code_ambiguous: bool = Field(
        default=False,
        description="True when another domain in the same result resolved to the same code"
    )
    raw_score: int = Field(..., ge=0)
    max_possible: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
    proficiency: ProficiencyLevel
    question_count: int = Field(..., ge=0)
    questions: List[QuestionScore] = Field(default_factory=list)


class VBGradingResult(BaseModel):
    """
    Full grading output for one completed session. Recomputed on every request.
    """

    session_id: str
    child_id: str
    child_name: Optional[str] = None
    assessment_type: str
    completed_at: datetime
    domain_scores: List[DomainScore] = Field(default_factory=list)
    overall_score: int = Field(..., ge=0)
    overall_max_possible: int = Field(..., ge=0)
    overall_percentage: float = Field(..., ge=0, le=100)
    overall_proficiency: ProficiencyLevel
    vb_export: List[VBExportRow] = Field(default_factory=list)


class VBMapRequest(BaseModel):
    """
    Batch VB mapping request: numeric answers plus optional per-question max scores.
    """

    answers: dict[str, Optional[float]] = Field(default_factory=dict)
    score_map: dict[str, Optional[float]] = Field(default_factory=dict)
