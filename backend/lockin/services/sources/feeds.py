from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Any

from bs4 import BeautifulSoup

from lockin.services.normalize import build_posting, mentions_any
from lockin.services.postings import RawJobPosting
from lockin.services.sources.base import JobSource


def html_to_text(value: Any) -> str:
    if not value:
        return ""
    return BeautifulSoup(str(value), "html.parser").get_text(" ", strip=True)


def _timestamp_to_iso(value: Any) -> str | None:
    if isinstance(value, (int, float)):
        with contextlib.suppress(ValueError, OSError, OverflowError):
            return datetime.fromtimestamp(float(value), tz=timezone.utc).date().isoformat()
        return None
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class RemoteOkSource(JobSource):
    """RemoteOK public feed; the first array element is a legal notice, not a job."""

    name = "remoteok"
    api_url = "https://remoteok.com/api"

    async def _fetch(self, terms: list[str], location: str | None) -> list[RawJobPosting]:
        async with self.http_client() as client:
            response = await client.get(self.api_url)
        if response.status_code >= 400:
            return []

        payload = response.json()
        if not isinstance(payload, list):
            return []

        postings: list[RawJobPosting] = []
        for item in payload[1:]:
            if not isinstance(item, dict):
                continue
            posting = self.parse_item(item)
            if posting is None:
                continue
            if not mentions_any(terms, posting.title, posting.description):
                continue
            postings.append(posting)
            if len(postings) >= self.max_results:
                break
        return postings

    def parse_item(self, item: dict[str, Any]) -> RawJobPosting | None:
        title = str(item.get("position") or "").strip()
        url = str(item.get("url") or "").strip()
        if not url and item.get("id"):
            url = f"https://remoteok.com/remote-jobs/{item['id']}"
        if not title or not url:
            return None

        salary = None
        if item.get("salary_min") and item.get("salary_max"):
            salary = f"${item['salary_min']} - ${item['salary_max']}"

        return build_posting(
            source=self.name,
            title=title,
            company=item.get("company"),
            url=url,
            location=item.get("location"),
            description=html_to_text(item.get("description")),
            salary=salary,
            posted_date=_timestamp_to_iso(item.get("date")),
            default_location=self.default_location,
        )


class ArbeitnowSource(JobSource):
    """Arbeitnow job-board API (Germany-focused, paginated)."""

    name = "arbeitnow"
    api_url = "https://www.arbeitnow.com/api/job-board-api"
    default_location = "Germany"

    async def _fetch(self, terms: list[str], location: str | None) -> list[RawJobPosting]:
        postings: list[RawJobPosting] = []
        max_pages = max(1, self.config.max_scrape_pages)

        async with self.http_client() as client:
            for page in range(1, max_pages + 1):
                if page > 1:
                    await asyncio.sleep(self.config.scrape_delay_seconds)
                response = await client.get(self.api_url, params={"page": page})
                if response.status_code >= 400:
                    break
                items = (response.json() or {}).get("data") or []
                if not items:
                    break

                for item in items:
                    posting = self.parse_item(item, location)
                    if posting is None:
                        continue
                    tags = " ".join(str(tag) for tag in item.get("tags") or [])
                    if not mentions_any(terms, posting.title, posting.description, tags):
                        continue
                    postings.append(posting)
                    if len(postings) >= self.max_results:
                        return postings

        return postings

    def parse_item(self, item: dict[str, Any], location: str | None = None) -> RawJobPosting | None:
        title = str(item.get("title") or "").strip()
        url = str(item.get("url") or "").strip()
        if not url and item.get("slug"):
            url = f"https://www.arbeitnow.com/jobs/{str(item['slug']).strip('/')}"
        if not title or not url:
            return None

        item_location = str(item.get("location") or "").strip()
        if not item_location and item.get("remote"):
            item_location = "Remote"

        return build_posting(
            source=self.name,
            title=title,
            company=item.get("company_name"),
            url=url,
            location=item_location,
            description=html_to_text(item.get("description")),
            posted_date=_timestamp_to_iso(item.get("created_at")),
            default_location=self.fallback_location(location),
        )
