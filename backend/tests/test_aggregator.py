import pytest

from conftest import make_posting
from lockin.services.aggregator import JobAggregator
from lockin.services.sources.base import JobSource


class StaticSource(JobSource):
    def __init__(self, config, name, titles):
        super().__init__(config)
        self.name = name
        self.titles = titles

    async def _fetch(self, terms, location):
        return [make_posting(title) for title in self.titles]


class BrokenSource(JobSource):
    name = "broken"

    async def _fetch(self, terms, location):
        raise RuntimeError("markup changed")


class ExplodingSource(JobSource):
    """Bypasses the per-source guard so the aggregator has to absorb the error."""

    name = "exploding"

    async def fetch(self, terms, location=None):
        raise RuntimeError("unexpected")

    async def _fetch(self, terms, location):
        return []


@pytest.mark.asyncio
async def test_failing_source_does_not_block_others(test_settings):
    aggregator = JobAggregator(
        [
            StaticSource(test_settings, "first", ["A", "B"]),
            BrokenSource(test_settings),
            ExplodingSource(test_settings),
            StaticSource(test_settings, "second", ["C"]),
        ]
    )

    postings = await aggregator.collect(["python"])

    assert [p.title for p in postings] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_cross_source_duplicates_are_kept(test_settings):
    aggregator = JobAggregator(
        [
            StaticSource(test_settings, "first", ["Python Dev"]),
            StaticSource(test_settings, "second", ["Python Dev"]),
        ]
    )

    postings = await aggregator.collect(["python"])

    assert len(postings) == 2


@pytest.mark.asyncio
async def test_per_source_cap_applies(test_settings):
    test_settings.max_jobs_per_source = 3
    aggregator = JobAggregator([StaticSource(test_settings, "many", [f"Job {i}" for i in range(10)])])

    postings = await aggregator.collect(["python"])

    assert len(postings) == 3


@pytest.mark.asyncio
async def test_no_sources_returns_empty_list():
    assert await JobAggregator([]).collect(["python"]) == []
