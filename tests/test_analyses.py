import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch
import uuid
from datetime import datetime

from resume_ats.models.models import CompanyRequirements

RESUME_TEXT = (
    "Education: B.Tech, XYZ University. Skills: Python, SQL, React. "
    "Projects: Built a library app using React for 500 users. Developed a chat bot. "
    "Experience: Intern, Jun 2023 - Aug 2023. Contact: asha@mail.com, github.com/asha"
)

HEADERS = {"X-Student-Id": "student-1"}


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from resume_ats.routers import analyses

    app = FastAPI()
    app.include_router(analyses.router, prefix="/api/analyses")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def requirements():
    return CompanyRequirements(
        company_id="acme",
        company_name="Acme Corp",
        role="SDE",
        required_skills=["Python", "Java"],
        keywords=["agile"],
    )


def cursor_returning(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def stored_analysis(company, score, resume_id):
    return {
        "analysis_id": str(uuid.uuid4()),
        "resume_id": resume_id,
        "student_id": "student-1",
        "company_name": company,
        "company_id": company.lower(),
        "target_role": "SDE",
        "ats_score": score,
        "section_scores": [
            {"name": "Skills Match", "score": 20, "max_score": 30, "details": ""},
            {"name": "Keywords", "score": 10, "max_score": 20, "details": ""},
            {"name": "Projects", "score": 10, "max_score": 20, "details": ""},
            {"name": "Experience", "score": 5, "max_score": 15, "details": ""},
            {"name": "Structure", "score": score - 45, "max_score": 15, "details": ""},
        ],
        "created_at": datetime.utcnow(),
    }


class TestScoreEndpoint:
    """Test cases for stateless scoring"""

    def test_score_success(self, client):
        payload = {
            "resume_text": RESUME_TEXT,
            "requirements": {
                "company_id": "acme",
                "company_name": "Acme Corp",
                "role": "SDE",
                "required_skills": ["Python", "JavaScript"],
            },
        }

        response = client.post("/api/analyses/score", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["matched_skills"] == ["Python"]
        assert data["missing_skills"] == ["JavaScript"]
        assert len(data["section_scores"]) == 5
        assert data["total_score"] == sum(s["score"] for s in data["section_scores"])

    def test_score_extra_synonyms(self, client):
        payload = {
            "resume_text": "Skills: ES6, Python",
            "requirements": {
                "company_id": "acme",
                "company_name": "Acme Corp",
                "role": "SDE",
                "required_skills": ["JavaScript"],
            },
            "extra_synonyms": {"javascript": ["es6"]},
        }

        response = client.post("/api/analyses/score", json=payload)

        assert response.status_code == 200
        assert response.json()["matched_skills"] == ["JavaScript"]

    def test_score_incomplete_requirements(self, client):
        payload = {
            "resume_text": RESUME_TEXT,
            "requirements": {"company_id": "acme", "company_name": "Acme Corp"},
        }

        response = client.post("/api/analyses/score", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["error_code"] == "INVALID_INPUT"

    def test_score_null_resume(self, client):
        payload = {
            "resume_text": None,
            "requirements": {"company_id": "acme", "company_name": "Acme Corp", "role": "SDE"},
        }

        response = client.post("/api/analyses/score", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["details"]["field"] == "resume_text"

    def test_score_blank_company_id(self, client):
        payload = {
            "resume_text": RESUME_TEXT,
            "requirements": {"company_id": " ", "company_name": "Acme Corp", "role": "SDE"},
        }

        response = client.post("/api/analyses/score", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["details"]["field"] == "requirements"

    def test_score_null_requirements(self, client):
        response = client.post("/api/analyses/score", json={"resume_text": RESUME_TEXT, "requirements": None})
        assert response.status_code == 400


class TestAnalyzeEndpoint:
    """Test cases for running and storing an analysis"""

    def test_missing_student_header(self, client):
        response = client.post("/api/analyses/", json={"resume_text": RESUME_TEXT, "company_name": "Acme", "target_role": "SDE"})
        assert response.status_code == 401

    @patch('resume_ats.routers.analyses.RequirementsService.resolve', new_callable=AsyncMock)
    @patch('resume_ats.routers.analyses.analyses_coll')
    def test_analyze_inline_text(self, mock_analyses_coll, mock_resolve, client, requirements):
        """Inline text is scored, stored without a resume id and returned with feedback"""
        mock_resolve.return_value = requirements
        mock_analyses_coll.insert_one = AsyncMock()

        payload = {"resume_text": RESUME_TEXT, "company_id": "acme", "target_role": "SDE"}
        response = client.post("/api/analyses/", json=payload, headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["resume_id"] is None
        assert data["company_name"] == "Acme Corp"
        assert data["matched_skills"] == ["Python"]
        assert data["missing_skills"] == ["Java"]
        assert data["feedback"]["source"] == "fallback"
        assert data["text_warning"] is None
        assert "student_id" not in data

        stored = mock_analyses_coll.insert_one.call_args.args[0]
        assert stored["student_id"] == "student-1"
        assert stored["ats_score"] == data["ats_score"]
        mock_resolve.assert_awaited_once_with("acme", None, "SDE")

    @patch('resume_ats.routers.analyses.RequirementsService.resolve', new_callable=AsyncMock)
    @patch('resume_ats.routers.analyses.analyses_coll')
    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_analyze_stored_resume(self, mock_resumes_coll, mock_analyses_coll, mock_resolve, client, requirements):
        resume_id = str(uuid.uuid4())
        mock_resumes_coll.find_one = AsyncMock(return_value={
            "resume_id": resume_id, "student_id": "student-1", "parsed_text": RESUME_TEXT,
        })
        mock_analyses_coll.insert_one = AsyncMock()
        mock_resolve.return_value = requirements

        payload = {"resume_id": resume_id, "company_id": "acme", "target_role": "SDE", "include_feedback": False}
        response = client.post("/api/analyses/", json=payload, headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["resume_id"] == resume_id
        assert data["feedback"] is None

    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_analyze_resume_not_found(self, mock_resumes_coll, client):
        mock_resumes_coll.find_one = AsyncMock(return_value=None)

        payload = {"resume_id": "missing", "company_id": "acme", "target_role": "SDE"}
        response = client.post("/api/analyses/", json=payload, headers=HEADERS)

        assert response.status_code == 404

    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_analyze_empty_text(self, mock_resumes_coll, client):
        mock_resumes_coll.find_one = AsyncMock(return_value={"resume_id": "r1", "parsed_text": "  \x00 "})

        payload = {"resume_id": "r1", "company_id": "acme", "target_role": "SDE"}
        response = client.post("/api/analyses/", json=payload, headers=HEADERS)

        assert response.status_code == 400
        assert "re-upload" in response.json()["detail"]

    @patch('resume_ats.routers.analyses.RequirementsService.resolve', new_callable=AsyncMock)
    @patch('resume_ats.routers.analyses.analyses_coll')
    def test_short_text_scored_with_warning(self, mock_analyses_coll, mock_resolve, client, requirements):
        mock_resolve.return_value = requirements
        mock_analyses_coll.insert_one = AsyncMock()

        payload = {"resume_text": "Python", "company_name": "Acme Corp", "target_role": "SDE", "include_feedback": False}
        response = client.post("/api/analyses/", json=payload, headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["text_warning"]

    def test_analyze_needs_company(self, client):
        payload = {"resume_text": RESUME_TEXT, "target_role": "SDE"}
        response = client.post("/api/analyses/", json=payload, headers=HEADERS)
        assert response.status_code == 422


class TestCompareEndpoint:
    """Test cases for cross-company comparison"""

    @patch('resume_ats.routers.analyses.analyses_coll')
    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_compare_json(self, mock_resumes_coll, mock_analyses_coll, client):
        resume_id = str(uuid.uuid4())
        mock_resumes_coll.find_one = AsyncMock(return_value={"resume_id": resume_id, "file_name": "cv.pdf"})
        docs = [stored_analysis("Acme", 58, resume_id), stored_analysis("Globex", 50, resume_id)]
        mock_analyses_coll.find = MagicMock(return_value=cursor_returning(docs))

        response = client.get(f"/api/analyses/compare?resume_id={resume_id}", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["file_name"] == "cv.pdf"
        assert [c["company_name"] for c in data["comparisons"]] == ["Acme", "Globex"]
        mock_analyses_coll.find.return_value.sort.assert_called_once_with("ats_score", -1)

    @patch('resume_ats.routers.analyses.analyses_coll')
    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_compare_csv(self, mock_resumes_coll, mock_analyses_coll, client):
        mock_resumes_coll.find_one = AsyncMock(return_value={"resume_id": "r1", "file_name": "cv.pdf"})
        docs = [stored_analysis("Acme", 58, "r1")]
        mock_analyses_coll.find = MagicMock(return_value=cursor_returning(docs))

        response = client.get("/api/analyses/compare?resume_id=r1&format=csv", headers=HEADERS)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines()[0].startswith("analysis_id,company_name")

    @patch('resume_ats.routers.analyses.analyses_coll')
    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_compare_markdown(self, mock_resumes_coll, mock_analyses_coll, client):
        mock_resumes_coll.find_one = AsyncMock(return_value={"resume_id": "r1", "file_name": "cv.pdf"})
        mock_analyses_coll.find = MagicMock(return_value=cursor_returning([]))

        response = client.get("/api/analyses/compare?resume_id=r1&format=markdown", headers=HEADERS)

        assert response.status_code == 200
        assert "No analyses recorded" in response.text

    def test_compare_bad_format(self, client):
        response = client.get("/api/analyses/compare?resume_id=r1&format=xml", headers=HEADERS)
        assert response.status_code == 422

    @patch('resume_ats.routers.analyses.resumes_coll')
    def test_compare_unknown_resume(self, mock_resumes_coll, client):
        mock_resumes_coll.find_one = AsyncMock(return_value=None)

        response = client.get("/api/analyses/compare?resume_id=nope", headers=HEADERS)

        assert response.status_code == 404
