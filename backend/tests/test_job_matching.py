import pytest

from conftest import make_job, make_posting, make_resume
from lockin.models import Job, Match
from lockin.services.errors import ResumeNotAnalyzedError
from lockin.services.job_ingest import scrape_and_store_jobs
from lockin.services.job_matching import insert_match_ignore_conflict, match_jobs_with_resume
from lockin.services.matcher import JobMatcher


class NoLLM:
    async def complete_json(self, system_prompt, user_prompt):
        raise AssertionError("heuristic matching must not call the LLM")


class FakeAggregator:
    def __init__(self, postings):
        self.postings = postings

    async def collect(self, terms, location=None):
        return list(self.postings)


def test_matching_persists_positive_scores_sorted_descending(db_session, user):
    resume = make_resume(db_session, user, {"skills": ["Python", "AWS"], "experience": 3})
    make_job(db_session, "Frontend", ["React"])
    make_job(db_session, "Backend", ["Python"])
    make_job(db_session, "Cloud", ["python", "aws"], description="Experience with serverless")

    results = match_jobs_with_resume(db_session, resume, JobMatcher(NoLLM()))

    assert [(row["job"].title, row["score"]) for row in results] == [("Cloud", 2.5), ("Backend", 1)]
    assert results[0]["matchedSkills"] == ["Python", "AWS"]
    assert db_session.query(Match).count() == 2


def test_rerunning_matching_keeps_one_row_per_pair_with_first_score(db_session, user):
    resume = make_resume(db_session, user, {"skills": ["Python"], "experience": 0})
    job = make_job(db_session, "Backend", ["Python"])
    matcher = JobMatcher(NoLLM())

    match_jobs_with_resume(db_session, resume, matcher)
    job.skills = ["Python", "Django"]
    job.description = "Experience required"
    db_session.commit()
    resume.analysis = {"skills": ["Python", "Django"], "experience": 5}
    db_session.commit()
    second = match_jobs_with_resume(db_session, resume, matcher)

    rows = db_session.query(Match).all()
    assert len(rows) == 1
    assert rows[0].score == 1
    assert second[0]["score"] == 2.5


def test_insert_ignore_reports_whether_a_row_was_written(db_session, user):
    resume = make_resume(db_session, user, {"skills": ["Python"]})
    job = make_job(db_session, "Backend", ["Python"])

    assert insert_match_ignore_conflict(db_session, resume.id, job.id, 3.0) is True
    assert insert_match_ignore_conflict(db_session, resume.id, job.id, 9.0) is False
    db_session.commit()

    assert db_session.query(Match).one().score == 3.0


def test_unanalyzed_resume_is_rejected(db_session, user):
    resume = make_resume(db_session, user, None)
    make_job(db_session, "Backend", ["Python"])

    with pytest.raises(ResumeNotAnalyzedError):
        match_jobs_with_resume(db_session, resume, JobMatcher(NoLLM()))
    assert db_session.query(Match).count() == 0


@pytest.mark.asyncio
async def test_scrape_and_store_skips_known_title_company_pairs(db_session):
    make_job(db_session, "Python Dev", ["Python"], company="Acme")
    aggregator = FakeAggregator(
        [
            make_posting("python dev", company="ACME"),
            make_posting("Data Engineer", company="Beta", description="Python, Kafka"),
            make_posting("Data Engineer", company="beta"),
        ]
    )

    created = await scrape_and_store_jobs(db_session, aggregator, ["python"])

    assert created == 1
    stored = db_session.query(Job).filter(Job.company == "Beta").one()
    assert stored.skills == ["Python"]
    assert db_session.query(Job).count() == 2
