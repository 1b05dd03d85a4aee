from pydantic import BaseModel, Field
from typing import Optional, List


class Question(BaseModel):
    """
    A single questionnaire item as seeded in the template store.
    """

    id: str = Field(..., description="Stable question identifier")
    skill_code: Optional[str] = Field(
        default=None,
        description="Domain-scoped short label, e.g. 'A1' (may be empty)"
    )
    task_name: Optional[str] = Field(default=None, description="Display task name")
    question_text: str = Field(default="", description="Question text shown to the respondent")
    options: List[str] = Field(
        default_factory=list,
        description="Textual response options, expected to enumerate scores 0..N"
    )
    score_type: Optional[str] = Field(
        default=None,
        description="Explicit score range descriptor, e.g. '0-4'"
    )
    sort_order: int = Field(default=0, ge=0)

    class Config:
        from_attributes = True


class Domain(BaseModel):
    """
    Ordered group of questions under a name.
    """

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    code: Optional[str] = Field(
        default=None,
        max_length=10,
        description="Explicit short domain label; derived from the name when absent"
    )
    sort_order: int = Field(default=0, ge=0)
    questions: List[Question] = Field(default_factory=list)


class Template(BaseModel):
    """
    Full questionnaire template with domains and questions in persisted order.
    """

    id: Optional[str] = None
    assessment_type: str
    title: Optional[str] = None
    description: Optional[str] = None
    domains: List[Domain] = Field(default_factory=list)

    @property
    def question_count(self) -> int:
        return sum(len(d.questions) for d in self.domains)


class DomainSummary(BaseModel):
    id: Optional[str] = None
    name: str
    question_count: int


class TemplateSummary(BaseModel):
    """
    Template listing entry with domain/question counts.
    """

    id: Optional[str] = None
    assessment_type: str
    title: Optional[str] = None
    description: Optional[str] = None
    total_questions: int
    domains: List[DomainSummary]
