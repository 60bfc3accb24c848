from __future__ import annotations

from typing import Any

from lockin.services.normalize import build_posting, mentions_any
from lockin.services.postings import RawJobPosting
from lockin.services.sources.base import JobSource


def best_apply_link(hit: dict[str, Any]) -> str:
    for key in ("apply_options", "related_links"):
        options = hit.get(key) or []
        if isinstance(options, list):
            for option in options:
                link = str((option or {}).get("link") or "").strip()
                if link:
                    return link
    return str(hit.get("share_link") or hit.get("link") or "").strip()


class SerpApiSource(JobSource):
    """Google Jobs results through SerpAPI."""

    name = "serpapi"
    api_url = "https://serpapi.com/search"

    async def _fetch(self, terms: list[str], location: str | None) -> list[RawJobPosting]:
        if not self.config.serpapi_key:
            return []

        params = {
            "engine": "google_jobs",
            "q": self.query_string(terms, joiner=" OR "),
            "api_key": self.config.serpapi_key,
        }
        if location:
            params["location"] = location

        async with self.http_client() as client:
            response = await client.get(self.api_url, params=params)
        if response.status_code >= 400:
            return []

        postings: list[RawJobPosting] = []
        for hit in (response.json() or {}).get("jobs_results") or []:
            posting = self.parse_hit(hit, location)
            if posting is None:
                continue
            if not mentions_any(terms, posting.title, posting.description):
                continue
            postings.append(posting)
            if len(postings) >= self.max_results:
                break
        return postings

    def parse_hit(self, hit: dict[str, Any], location: str | None = None) -> RawJobPosting | None:
        title = str(hit.get("title") or "").strip()
        url = best_apply_link(hit)
        if not title or not url:
            return None

        extensions = hit.get("detected_extensions") or {}
        return build_posting(
            source=self.name,
            title=title,
            company=hit.get("company_name"),
            url=url,
            location=hit.get("location"),
            description=hit.get("description"),
            salary=extensions.get("salary"),
            posted_date=extensions.get("posted_at"),
            default_location=self.fallback_location(location),
        )
