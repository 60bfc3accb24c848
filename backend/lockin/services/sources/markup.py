"""HTML scraping adapters.

Every site is described by a ``SelectorProfile``: for each field an ordered
tuple of CSS selectors, tried in order until one yields a non-empty value.
Supporting a new site (or a markup change on an old one) means editing data,
not parsing code.
"""

from __future__ import annotations

import asyncio
import re
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from lockin.services.normalize import build_posting, clean_text, mentions_any, normalize_url, today_iso
from lockin.services.postings import RawJobPosting
from lockin.services.sources.base import JobSource


@dataclass(frozen=True)
class SelectorProfile:
    cards: tuple[str, ...]
    title: tuple[str, ...]
    company: tuple[str, ...]
    link: tuple[str, ...]
    location: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    posted: tuple[str, ...] = ()


def select_cards(soup: Any, selectors: tuple[str, ...]) -> list[Any]:
    for selector in selectors:
        cards = soup.select(selector)
        if cards:
            return cards
    return []


def select_text(node: Any, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        found = node.select_one(selector)
        if found is None:
            continue
        text = clean_text(found.get_text(" ", strip=True))
        if text:
            return text
    return ""


def select_attr(node: Any, selectors: tuple[str, ...], attr: str) -> str:
    for selector in selectors:
        found = node.select_one(selector)
        if found is None:
            continue
        value = str(found.get(attr) or "").strip()
        if value:
            return value
    return ""


def select_posted(node: Any, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        found = node.select_one(selector)
        if found is None:
            continue
        value = str(found.get("datetime") or "").strip() or clean_text(found.get_text(" ", strip=True))
        if value:
            return value
    return ""


class MarkupJobSource(JobSource):
    base_url: str = ""
    selectors: SelectorProfile
    filter_by_terms: bool = False

    @abstractmethod
    def page_urls(self, terms: list[str], location: str | None) -> list[str]:
        """Listing URLs in page order; only the first ``max_scrape_pages`` are visited."""

    async def _fetch(self, terms: list[str], location: str | None) -> list[RawJobPosting]:
        postings: list[RawJobPosting] = []
        seen_titles: set[str] = set()
        urls = self.page_urls(terms, location)[: max(1, self.config.max_scrape_pages)]

        async with self.http_client() as client:
            for page_idx, url in enumerate(urls):
                if page_idx:
                    await asyncio.sleep(self.config.scrape_delay_seconds)
                response = await client.get(url)
                if response.status_code >= 400:
                    break

                soup = BeautifulSoup(response.text, "html.parser")
                cards = select_cards(soup, self.selectors.cards)
                if not cards:
                    break

                for card in cards:
                    posting = self.parse_card(card, location)
                    if posting is None:
                        continue
                    if self.filter_by_terms and terms and not mentions_any(terms, posting.title, posting.description):
                        continue
                    title_key = posting.title.lower()
                    if title_key in seen_titles:
                        continue
                    seen_titles.add(title_key)
                    postings.append(posting)
                    if len(postings) >= self.max_results:
                        return postings

        return postings

    def parse_card(self, card: Any, location: str | None = None) -> RawJobPosting | None:
        profile = self.selectors
        title = select_text(card, profile.title)
        company = select_text(card, profile.company)
        url = normalize_url(select_attr(card, profile.link, "href"), self.base_url)
        if not (title and company and url):
            return None

        return build_posting(
            source=self.name,
            title=title,
            company=company,
            url=url,
            location=select_text(card, profile.location),
            description=select_text(card, profile.description),
            posted_date=select_posted(card, profile.posted) or today_iso(),
            default_location=self.fallback_location(location),
        )


class IndeedSource(MarkupJobSource):
    name = "indeed"
    base_url = "https://www.indeed.com"
    page_size = 10
    selectors = SelectorProfile(
        cards=(".job_seen_beacon", ".slider_container .slider_item", "div.cardOutline"),
        title=("h2 a span", "[data-jk] span", "h2.jobTitle", "a.jcs-JobTitle"),
        company=('[data-testid="company-name"]', "span.companyName"),
        link=("h2 a[href]", "a.jcs-JobTitle[href]", "a[data-jk][href]"),
        location=('[data-testid="text-location"]', '[data-testid="job-location"]', "div.companyLocation"),
        description=(".job-snippet", '[data-testid="jobsnippet_footer"]', "ul"),
        posted=("span.date", "time"),
    )

    def page_urls(self, terms: list[str], location: str | None) -> list[str]:
        query = quote_plus(self.query_string(terms, joiner=" OR "))
        where = quote_plus(self.fallback_location(location))
        return [
            f"{self.base_url}/jobs?q={query}&l={where}&sort=date&start={page * self.page_size}"
            for page in range(max(1, self.config.max_scrape_pages))
        ]


class StepStoneSource(MarkupJobSource):
    name = "stepstone"
    base_url = "https://www.stepstone.de"
    default_location = "Germany"
    selectors = SelectorProfile(
        cards=("article[data-testid='job-item']", "article"),
        title=("a[data-testid='job-item-title']", "h2", "h3"),
        company=("[data-at='job-item-company-name']", "[data-testid='job-item-company-name']"),
        link=(
            "a[data-testid='job-item-title'][href]",
            "a[href*='/stellenangebote']",
            "a[href*='/job/']",
        ),
        location=("[data-at='job-item-location']", "[data-testid='job-item-location']"),
        description=("[data-at='job-item-teaser']", "[data-at='job-item-description']", "p"),
        posted=("time",),
    )

    def page_urls(self, terms: list[str], location: str | None) -> list[str]:
        slug = _slugify(self.query_string(terms))
        where = quote_plus((location or "").strip())
        return [
            f"{self.base_url}/jobs/{slug}?where={where}&page={page}&sort=2"
            for page in range(1, max(1, self.config.max_scrape_pages) + 1)
        ]


class BerlinStartupJobsSource(MarkupJobSource):
    name = "berlinstartupjobs"
    base_url = "https://berlinstartupjobs.com"
    default_location = "Berlin, Germany"
    filter_by_terms = True
    selectors = SelectorProfile(
        cards=("li.bjs-jlis", "li.job_listing", "article.job-listing", "div.job-listing"),
        title=("h4 a", "h3 a", "h2 a", ".job_listing-title"),
        company=("a.bjs-jlis__b", ".bjs-jlis__b", ".company", ".job_listing-company"),
        link=("h4 a[href]", "h3 a[href]", "h2 a[href]", "a[href]"),
        location=(".location", ".job_listing-location"),
        description=(".bjs-jlis__description", ".job_listing-description", ".excerpt", "p"),
        posted=("time", ".date"),
    )

    def fallback_location(self, location: str | None) -> str:
        return self.default_location

    def page_urls(self, terms: list[str], location: str | None) -> list[str]:
        root = f"{self.base_url}/engineering/"
        return [root] + [
            f"{root}page/{page}/" for page in range(2, max(1, self.config.max_scrape_pages) + 1)
        ]


def _slugify(value: str) -> str:
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", (value or "").strip()).strip("-").lower()
    return slug or "jobs"
