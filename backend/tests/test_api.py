import io
import uuid

import docx
import pytest

from conftest import make_job, make_posting, make_resume
from lockin.api.deps import get_analyzer, get_recommender
from lockin.config import settings
from lockin.main import app
from lockin.models import Match, User
from lockin.schemas.resume import ResumeAnalysis
from lockin.services.errors import LLMError
from lockin.services.matcher import JobMatcher
from lockin.services.recommender import RecommendationService


class FakeAggregator:
    def __init__(self, postings):
        self.postings = postings
        self.calls = 0

    async def collect(self, terms, location=None):
        self.calls += 1
        return list(self.postings)


class FixedScoreLLM:
    def __init__(self, score):
        self.score = score

    async def complete_json(self, system_prompt, user_prompt):
        return {"score": self.score, "matchingSkills": ["Python"], "missingSkills": ["Go"], "reasoning": "fit"}


class FakeAnalyzer:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def analyze(self, raw_text):
        if self.error:
            raise self.error
        return self.result


@pytest.fixture()
def use_recommender(test_settings):
    def _install(postings, score):
        aggregator = FakeAggregator(postings)
        service = RecommendationService(aggregator, JobMatcher(FixedScoreLLM(score)), test_settings)
        app.dependency_overrides[get_recommender] = lambda: service
        return aggregator

    return _install


def test_health(anon_client):
    assert anon_client.get("/health").json() == {"status": "ok"}


# Matching


def test_match_with_malformed_id_is_validation_error(client):
    response = client.post("/api/jobs/match/not-a-uuid")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert body["errors"][0]["field"] == "resume_id"


def test_match_with_unknown_resume_is_404(client):
    response = client.post(f"/api/jobs/match/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Resume not found"


def test_match_with_unanalyzed_resume_is_400(client, db_session, user):
    resume = make_resume(db_session, user, None)

    response = client.post(f"/api/jobs/match/{resume.id}")

    assert response.status_code == 400
    assert "not been analyzed" in response.json()["detail"]


def test_match_returns_ranked_jobs_and_persists_matches(client, db_session, user):
    resume = make_resume(db_session, user, {"skills": ["Python", "Docker"], "experience": 2})
    make_job(db_session, "Platform Engineer", ["Python", "Docker"])
    make_job(db_session, "Designer", ["Figma"])

    response = client.post(f"/api/jobs/match/{resume.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [row["job"]["title"] for row in body["data"]] == ["Platform Engineer"]
    assert body["data"][0]["score"] == 2
    assert body["data"][0]["matchedSkills"] == ["Python", "Docker"]
    assert db_session.query(Match).count() == 1


def test_match_does_not_expose_other_users_resumes(client, db_session):
    stranger = User(email="eve@example.com", name="Eve")
    db_session.add(stranger)
    db_session.commit()
    resume = make_resume(db_session, stranger, {"skills": ["Python"]})

    assert client.post(f"/api/jobs/match/{resume.id}").status_code == 404


# Recommendations


def test_recommendations_with_malformed_id_is_400(client):
    assert client.get("/api/resumes/12345/recommendations").status_code == 400


def test_recommendations_with_unknown_resume_is_404(client):
    assert client.get(f"/api/resumes/{uuid.uuid4()}/recommendations").status_code == 404


def test_recommendations_for_unanalyzed_resume_fail_before_scraping(client, db_session, user, use_recommender):
    aggregator = use_recommender([make_posting("Backend Engineer")], 80)
    resume = make_resume(db_session, user, None)

    response = client.get(f"/api/resumes/{resume.id}/recommendations")

    assert response.status_code == 400
    assert aggregator.calls == 0


def test_recommendations_without_strong_matches(client, db_session, user, use_recommender):
    use_recommender([make_posting("Backend Engineer")], 5)
    resume = make_resume(db_session, user, {"skills": ["Python"], "experience": 1})

    response = client.get(f"/api/resumes/{resume.id}/recommendations")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "No strong job matches found.", "data": []}


def test_recommendations_are_returned(client, db_session, user, use_recommender):
    use_recommender([make_posting("Backend Engineer"), make_posting("API Developer")], 64)
    resume = make_resume(db_session, user, {"skills": ["Python"], "experience": 1})

    response = client.get(f"/api/resumes/{resume.id}/recommendations", params={"location": "Berlin"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [row["jobTitle"] for row in data] == ["Backend Engineer", "API Developer"]
    assert data[0]["compatibilityScore"] == 64
    assert data[0]["missingSkills"] == ["Go"]
    assert data[0]["source"] == "fake"


# Job CRUD


def test_job_crud_roundtrip(client):
    created = client.post(
        "/api/jobs",
        json={"title": "Data Engineer", "company": "Acme", "location": "Berlin", "skills": ["Python", "Spark"]},
    )
    assert created.status_code == 201
    job_id = created.json()["data"]["id"]

    fetched = client.get(f"/api/jobs/{job_id}")
    assert fetched.json()["data"]["skills"] == ["Python", "Spark"]

    patched = client.patch(f"/api/jobs/{job_id}", json={"title": "Senior Data Engineer"})
    assert patched.json()["data"]["title"] == "Senior Data Engineer"
    assert patched.json()["data"]["company"] == "Acme"

    assert client.delete(f"/api/jobs/{job_id}").json()["success"] is True
    assert client.get(f"/api/jobs/{job_id}").status_code == 404


def test_job_list_paginates_and_sorts(client, db_session):
    for title in ["Charlie", "Alpha", "Bravo"]:
        make_job(db_session, title, ["Python"])

    response = client.get("/api/jobs", params={"page": 1, "limit": 2, "sort_by": "title", "sort_order": "asc"})

    body = response.json()
    assert [job["title"] for job in body["data"]] == ["Alpha", "Bravo"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}


def test_job_list_rejects_oversized_limit(client):
    response = client.get("/api/jobs", params={"limit": 101})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "limit"


def test_create_job_requires_title(client):
    response = client.post("/api/jobs", json={"company": "Acme"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "title"


# Resumes


def docx_bytes(text):
    document = docx.Document()
    document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_upload_extracts_docx_text(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))

    response = client.post(
        "/api/resumes",
        files={"file": ("My CV.docx", docx_bytes("Python engineer with 5 years of experience"), "application/octet-stream")},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["filename"] == "My_CV.docx"
    assert data["analysis"] is None
    assert data["file_url"].startswith("/uploads/")
    assert len(list(tmp_path.iterdir())) == 1


def test_upload_rejects_unsupported_type(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))

    response = client.post("/api/resumes", files={"file": ("cv.txt", b"hello", "text/plain")})

    assert response.status_code == 400


def test_analyze_stores_analysis(client, db_session, user):
    resume = make_resume(db_session, user, None)
    analysis = ResumeAnalysis(skills=["Python", "SQL"], experience=4, summary="Backend developer")
    app.dependency_overrides[get_analyzer] = lambda: FakeAnalyzer(result=analysis)

    response = client.post(f"/api/resumes/{resume.id}/analyze")

    assert response.status_code == 200
    assert response.json()["data"]["analysis"]["skills"] == ["Python", "SQL"]
    db_session.refresh(resume)
    assert resume.analysis["experience"] == 4


def test_analyze_failure_is_bad_gateway(client, db_session, user):
    resume = make_resume(db_session, user, None)
    app.dependency_overrides[get_analyzer] = lambda: FakeAnalyzer(error=LLMError("LLM API error: 503"))

    response = client.post(f"/api/resumes/{resume.id}/analyze")

    assert response.status_code == 502
    db_session.refresh(resume)
    assert resume.analysis is None


def test_update_and_delete_resume(client, db_session, user):
    resume = make_resume(db_session, user, None)

    updated = client.put(f"/api/resumes/{resume.id}", json={"analysis": {"skills": ["Go"], "experience": 1}})
    assert updated.json()["data"]["analysis"]["skills"] == ["Go"]

    listed = client.get("/api/resumes")
    assert [row["id"] for row in listed.json()["data"]] == [resume.id]

    assert client.delete(f"/api/resumes/{resume.id}").status_code == 200
    assert client.get(f"/api/resumes/{resume.id}").status_code == 404


def test_deleting_resume_removes_its_matches(client, db_session, user):
    resume = make_resume(db_session, user, {"skills": ["Python"], "experience": 1})
    make_job(db_session, "Backend Engineer", ["Python"])
    assert client.post(f"/api/jobs/match/{resume.id}").status_code == 200
    assert db_session.query(Match).count() == 1

    assert client.delete(f"/api/resumes/{resume.id}").status_code == 200

    assert db_session.query(Match).count() == 0


def test_update_rejects_negative_experience(client, db_session, user):
    resume = make_resume(db_session, user, None)

    response = client.put(f"/api/resumes/{resume.id}", json={"analysis": {"skills": [], "experience": -1}})

    assert response.status_code == 400
