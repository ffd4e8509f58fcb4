import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime, timedelta

HEADERS = {"X-Student-Id": "student-1"}


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from resume_ats.routers import resumes

    app = FastAPI()
    app.include_router(resumes.router, prefix="/api/resumes")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


def cursor_returning(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


class TestResumesRouter:
    """Test cases for resume storage and history"""

    @patch('resume_ats.routers.resumes.resumes_coll')
    def test_store_resume(self, mock_resumes_coll, client):
        mock_resumes_coll.insert_one = AsyncMock()

        payload = {"file_name": "asha.pdf", "text": "Skills: Python\r\n" * 20}
        response = client.post("/api/resumes/", json=payload, headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert "resume_id" in data
        assert data["file_name"] == "asha.pdf"
        assert data["text_usable"] is True

        stored = mock_resumes_coll.insert_one.call_args.args[0]
        assert stored["student_id"] == "student-1"
        assert "\r" not in stored["parsed_text"]

    @patch('resume_ats.routers.resumes.resumes_coll')
    def test_store_short_resume_flags_unusable(self, mock_resumes_coll, client):
        mock_resumes_coll.insert_one = AsyncMock()

        response = client.post("/api/resumes/", json={"text": "Python"}, headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["text_usable"] is False

    def test_store_empty_resume(self, client):
        response = client.post("/api/resumes/", json={"text": "   "}, headers=HEADERS)
        assert response.status_code == 400

    def test_store_requires_student(self, client):
        response = client.post("/api/resumes/", json={"text": "Python"})
        assert response.status_code == 401

    @patch('resume_ats.routers.resumes.analyses_coll')
    @patch('resume_ats.routers.resumes.resumes_coll')
    def test_history(self, mock_resumes_coll, mock_analyses_coll, client):
        """Analyses are grouped under their resume, newest first"""
        now = datetime.utcnow()
        mock_resumes_coll.find = MagicMock(return_value=cursor_returning([
            {"resume_id": "r2", "file_name": "v2.pdf", "created_at": now},
            {"resume_id": "r1", "file_name": "v1.pdf", "created_at": now - timedelta(days=3)},
        ]))
        section_scores = [{"name": "Skills Match", "score": 30, "max_score": 30, "details": ""}]
        mock_analyses_coll.find = MagicMock(return_value=cursor_returning([
            {"analysis_id": "a3", "resume_id": "r2", "company_name": "Acme", "company_id": "acme",
             "target_role": "SDE", "ats_score": 72, "section_scores": section_scores, "created_at": now},
            {"analysis_id": "a2", "resume_id": "r1", "company_name": "Acme", "company_id": "acme",
             "target_role": "SDE", "ats_score": 61, "section_scores": section_scores, "created_at": now},
            {"analysis_id": "a1", "resume_id": "r1", "company_name": "Globex", "company_id": "globex",
             "target_role": "SDE", "ats_score": 40, "section_scores": section_scores, "created_at": now},
        ]))

        response = client.get("/api/resumes/history", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [r["resume_id"] for r in data["resumes"]] == ["r2", "r1"]
        assert data["resumes"][1]["total_analyses"] == 2
        assert data["resumes"][1]["latest_score"] == 61
        mock_resumes_coll.find.assert_called_once_with({"student_id": "student-1"}, {"parsed_text": 0})

    @patch('resume_ats.routers.resumes.analyses_coll')
    @patch('resume_ats.routers.resumes.resumes_coll')
    def test_history_empty(self, mock_resumes_coll, mock_analyses_coll, client):
        mock_resumes_coll.find = MagicMock(return_value=cursor_returning([]))
        mock_analyses_coll.find = MagicMock(return_value=cursor_returning([]))

        response = client.get("/api/resumes/history", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"resumes": [], "total": 0}
