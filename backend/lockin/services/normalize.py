"""Normalization rules shared by every source adapter.

Adapters hand raw field values to ``build_posting``; the fallback values for
missing fields live here so each source only decides *which* default applies:

- company: ``"Not specified"`` when the source gives none
- location: the adapter's default location (e.g. ``"Remote"`` or the queried city)
- requirements: closed-vocabulary tags found in the description
"""

from __future__ import annotations

import html
import re
from datetime import date
from typing import Iterable
from urllib.parse import urljoin

from lockin.services.postings import RawJobPosting

MISSING_COMPANY = "Not specified"
DEFAULT_LOCATION = "Remote"

REQUIREMENT_VOCABULARY: tuple[str, ...] = (
    "JavaScript",
    "TypeScript",
    "React",
    "Node.js",
    "Python",
    "Java",
    "C#",
    "C++",
    "Angular",
    "Vue.js",
    "Next.js",
    "Express",
    "Django",
    "Flask",
    "FastAPI",
    "Spring",
    "Ruby",
    "PHP",
    "Kotlin",
    "Swift",
    "Rust",
    "MongoDB",
    "PostgreSQL",
    "MySQL",
    "Redis",
    "Kafka",
    "AWS",
    "Azure",
    "GCP",
    "Docker",
    "Kubernetes",
    "Terraform",
    "Linux",
    "Git",
    "REST",
    "GraphQL",
    "HTML",
    "CSS",
)


def uniq_preserve_order(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if not item:
            continue
        key = item.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def extract_requirements(description: str, vocabulary: Iterable[str] = REQUIREMENT_VOCABULARY) -> list[str]:
    lowered = (description or "").lower()
    if not lowered:
        return []
    return uniq_preserve_order(skill for skill in vocabulary if skill.lower() in lowered)


def clean_text(value: object) -> str:
    if value is None:
        return ""
    text = html.unescape(str(value))
    return re.sub(r"\s+", " ", text).strip()


def normalize_url(href: str, base_url: str) -> str:
    href = (href or "").strip()
    if not href:
        return ""
    if href.startswith("//"):
        return f"https:{href}"
    if href.startswith("http://") or href.startswith("https://"):
        return href
    return urljoin(f"{base_url.rstrip('/')}/", href.lstrip("/"))


def mentions_any(terms: Iterable[str], *texts: str) -> bool:
    haystack = " ".join(text or "" for text in texts).lower()
    return any(term.strip().lower() in haystack for term in terms if term and term.strip())


def build_posting(
    *,
    source: str,
    title: object,
    url: str,
    company: object = None,
    location: object = None,
    description: object = None,
    salary: str | None = None,
    posted_date: str | None = None,
    default_location: str = DEFAULT_LOCATION,
) -> RawJobPosting:
    description_text = clean_text(description)
    return RawJobPosting(
        title=clean_text(title),
        company=clean_text(company) or MISSING_COMPANY,
        location=clean_text(location) or default_location or DEFAULT_LOCATION,
        description=description_text,
        url=url.strip(),
        source=source,
        requirements=extract_requirements(description_text),
        salary=salary or None,
        posted_date=posted_date,
    )


def today_iso() -> str:
    return date.today().isoformat()
