"""
Model Validation Tests
tests/test_models.py
"""
import pytest
from pydantic import ValidationError

from ablls_platform.models.enumerations import AssessmentType, SessionStatus
from ablls_platform.models.grading import DomainScore, QuestionScore, VBMapRequest
from ablls_platform.models.session import AnswerUpsert, SessionCreate, SessionResponse
from ablls_platform.models.template import Domain, Question, Template


class TestSessionModels:

    def test_session_create_accepts_known_type(self):
        payload = SessionCreate(assessment_type="DAYC-2", child_id="c1", respondent_id="p1")
        assert payload.assessment_type == AssessmentType.DAYC_2
        assert payload.child_name is None

    def test_session_create_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            SessionCreate(assessment_type="VB-MAPP", child_id="c1", respondent_id="p1")

    @pytest.mark.parametrize("field", ["child_id", "respondent_id"])
    def test_session_create_requires_ids(self, field):
        data = {"assessment_type": "AFLLS", "child_id": "c1", "respondent_id": "p1"}
        data[field] = ""
        with pytest.raises(ValidationError):
            SessionCreate(**data)

    def test_session_defaults(self):
        session = SessionResponse(id="s", assessment_type="AFLLS", child_id="c")
        assert session.status == SessionStatus.IN_PROGRESS
        assert session.responses == []
        assert session.created_at.tzinfo is not None

    def test_answer_requires_question_id(self):
        with pytest.raises(ValidationError):
            AnswerUpsert(question_id="", answer="1")


class TestTemplateModels:

    def test_question_count(self, sample_template):
        assert sample_template.question_count == 4

    def test_domain_name_required(self):
        with pytest.raises(ValidationError):
            Domain(name="")

    def test_question_defaults(self):
        question = Question(id="q1")
        assert question.options == []
        assert question.score_type is None

    def test_template_round_trips_through_json(self, sample_template):
        assert Template.model_validate_json(sample_template.model_dump_json()) == sample_template


class TestGradingModels:

    def test_normalized_score_bounded(self):
        with pytest.raises(ValidationError):
            QuestionScore(
                question_id="q", selected_answer="5", numeric_score=5,
                max_score=5, normalized_score=5, vb_bar="X X X X",
            )

    def test_percentage_bounded(self):
        with pytest.raises(ValidationError):
            DomainScore(
                domain="A", domain_name="A", raw_score=1, max_possible=1,
                percentage=100.5, proficiency="Mastered", question_count=1,
            )

    def test_vb_map_request_allows_missing_scores(self):
        request = VBMapRequest(answers={"A1": None, "A2": 2})
        assert request.answers["A1"] is None
        assert request.score_map == {}
