"""
API Endpoint Tests - ABLLS Assessment Platform
tests/test_api.py

Routers run against in-memory repositories (see conftest.py); Redis and
Snowflake are never contacted.
"""
import io
from unittest.mock import MagicMock, patch

import redis
from openpyxl import load_workbook

from ablls_platform.core.exceptions import DatabaseConnectionException, RepositoryException
from ablls_platform.services.report_generator import SHEET_NAMES, XLSX_MEDIA_TYPE


# =============================================================================
# ROOT / HEALTH
# =============================================================================

class TestRootAndHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health_unhealthy_without_snowflake(self, client):
        with patch("ablls_platform.routers.health.settings") as mock_settings, \
             patch("ablls_platform.routers.health.get_cache", return_value=None):
            mock_settings.snowflake_configured = False
            mock_settings.APP_VERSION = "1.0.0"
            response = client.get("/health")
        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["dependencies"]["snowflake"] == "unhealthy: not configured"
        assert body["dependencies"]["redis"].startswith("unhealthy")

    def test_health_degraded_without_redis(self, client):
        with patch("ablls_platform.routers.health.check_snowflake", return_value="healthy"), \
             patch("ablls_platform.routers.health.get_cache", return_value=None):
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    def test_health_redis_ping_failure_is_reported(self, client):
        cache = MagicMock()
        cache.ping.side_effect = redis.ConnectionError("Connection refused")
        with patch("ablls_platform.routers.health.check_snowflake", return_value="healthy"), \
             patch("ablls_platform.routers.health.get_cache", return_value=cache):
            response = client.get("/health")
        assert response.json()["dependencies"]["redis"] == "unhealthy: Connection refused"

    def test_health_ok(self, client):
        with patch("ablls_platform.routers.health.check_snowflake", return_value="healthy"), \
             patch("ablls_platform.routers.health.get_cache", return_value=MagicMock()):
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# =============================================================================
# TEMPLATES
# =============================================================================

class TestTemplateEndpoints:

    def test_list_templates(self, client):
        response = client.get("/api/v1/templates")
        assert response.status_code == 200
        [summary] = response.json()
        assert summary["assessment_type"] == "ABLLS-R"
        assert summary["total_questions"] == 4

    def test_get_template(self, client):
        response = client.get("/api/v1/templates/ABLLS-R")
        assert response.status_code == 200
        assert [d["code"] for d in response.json()["domains"]] == ["A", "B"]

    def test_unknown_template(self, client):
        response = client.get("/api/v1/templates/AFLLS")
        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "TEMPLATE_NOT_FOUND"


# =============================================================================
# SESSIONS
# =============================================================================

class TestSessionEndpoints:

    def test_start_session_created(self, client):
        response = client.post("/api/v1/sessions", json={
            "assessment_type": "AFLLS", "child_id": "child-77", "respondent_id": "parent-77",
        })
        assert response.status_code == 201
        assert response.json()["status"] == "in-progress"

    def test_start_session_returns_existing(self, client):
        response = client.post("/api/v1/sessions", json={
            "assessment_type": "ABLLS-R", "child_id": "child-002", "respondent_id": "parent-002",
        })
        assert response.status_code == 200
        assert response.json()["id"] == "s-open"

    def test_start_session_invalid_type(self, client):
        response = client.post("/api/v1/sessions", json={
            "assessment_type": "VB-MAPP", "child_id": "c", "respondent_id": "p",
        })
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"]["field"] == "assessment_type"

    def test_start_session_malformed_json(self, client):
        response = client.post(
            "/api/v1/sessions",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_list_sessions(self, client):
        response = client.get("/api/v1/sessions", params={"assessment_type": "ABLLS-R"})
        assert response.status_code == 200
        assert {item["id"] for item in response.json()} == {"s-completed", "s-open"}

    def test_get_session_not_found(self, client):
        response = client.get("/api/v1/sessions/missing")
        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "SESSION_NOT_FOUND"

    def test_save_and_complete(self, client):
        saved = client.put("/api/v1/sessions/s-open/responses", json={
            "question_id": "q-b1", "answer": "2 - Inconsistent / Partial",
        })
        assert saved.status_code == 200
        assert saved.json()["answer"] == "2 - Inconsistent / Partial"

        completed = client.patch("/api/v1/sessions/s-open/complete")
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

    def test_save_to_completed_session_conflicts(self, client):
        response = client.put("/api/v1/sessions/s-completed/responses", json={
            "question_id": "q-b2", "answer": "4",
        })
        assert response.status_code == 409
        assert response.json()["detail"]["error_code"] == "INVALID_SESSION_STATE"

    def test_overlong_answer_is_rejected(self, client):
        response = client.put("/api/v1/sessions/s-open/responses", json={
            "question_id": "q-b1", "answer": "9" * 1001,
        })
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["message"] == "Answer must be at most 1000 characters"


# =============================================================================
# SCORING / REPORT / VB
# =============================================================================

class TestScoringEndpoints:

    def test_scoring(self, client):
        response = client.get("/api/v1/sessions/s-completed/scoring")
        assert response.status_code == 200
        body = response.json()
        assert body["overall_score"] == 9
        assert body["overall_max_possible"] == 14
        assert body["overall_percentage"] == 64.29
        assert body["overall_proficiency"] == "Proficient"
        assert [d["domain"] for d in body["domain_scores"]] == ["A", "B"]

    def test_scoring_in_progress_conflicts(self, client):
        response = client.get("/api/v1/sessions/s-open/scoring")
        assert response.status_code == 409
        assert response.json()["detail"]["details"]["status"] == "in-progress"

    def test_scoring_unknown_session(self, client):
        response = client.get("/api/v1/sessions/missing/scoring")
        assert response.status_code == 404

    def test_vb_export(self, client):
        response = client.get("/api/v1/sessions/s-completed/vb-export")
        assert response.status_code == 200
        assert response.json()[1] == {"question": "A2", "score": 2, "max": 2, "normalized": 4}

    def test_report_download(self, client):
        response = client.get("/api/v1/sessions/s-completed/report")
        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert 'filename="ABLLS_R_child-001_2026-03-14.xlsx"' in response.headers["content-disposition"]
        assert load_workbook(io.BytesIO(response.content)).sheetnames == SHEET_NAMES

    def test_report_for_in_progress_session(self, client):
        response = client.get("/api/v1/sessions/s-open/report")
        assert response.status_code == 409

    def test_vb_map(self, client):
        response = client.post("/api/v1/vb/map", json={
            "answers": {"A10": 1, "A2": 2},
            "score_map": {"A2": 2, "A3": 2},
        })
        assert response.status_code == 200
        rows = response.json()
        assert [r["question"] for r in rows] == ["A2", "A3", "A10"]
        assert rows[0]["filled_map"] == [True, True, True, True]
        assert rows[1]["filled_units"] == []
        assert rows[2]["filled_units"] == [4]


# =============================================================================
# WAREHOUSE FAILURES
# =============================================================================

class TestRepositoryErrors:

    def test_unreachable_warehouse_is_503(self, client, session_repo):
        with patch.object(
            session_repo, "get_by_id",
            side_effect=DatabaseConnectionException("Snowflake unreachable: timeout"),
        ):
            response = client.get("/api/v1/sessions/s-completed")
        assert response.status_code == 503
        assert response.json()["error_code"] == "DATABASE_UNAVAILABLE"

    def test_query_failure_is_500(self, client, session_repo):
        with patch.object(
            session_repo, "list_sessions",
            side_effect=RepositoryException("Snowflake query failed: syntax error"),
        ):
            response = client.get("/api/v1/sessions")
        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert "syntax error" not in body["message"]
