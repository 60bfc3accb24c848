from __future__ import annotations

import logging

import httpx

from lockin.config import Settings
from lockin.services.sources.base import JobSource
from lockin.services.sources.feeds import ArbeitnowSource, RemoteOkSource
from lockin.services.sources.markup import BerlinStartupJobsSource, IndeedSource, MarkupJobSource, SelectorProfile, StepStoneSource
from lockin.services.sources.serpapi import SerpApiSource

logger = logging.getLogger(__name__)

SOURCE_TYPES: dict[str, type[JobSource]] = {
    SerpApiSource.name: SerpApiSource,
    IndeedSource.name: IndeedSource,
    RemoteOkSource.name: RemoteOkSource,
    StepStoneSource.name: StepStoneSource,
    BerlinStartupJobsSource.name: BerlinStartupJobsSource,
    ArbeitnowSource.name: ArbeitnowSource,
}

__all__ = [
    "JobSource",
    "MarkupJobSource",
    "SelectorProfile",
    "SerpApiSource",
    "IndeedSource",
    "RemoteOkSource",
    "StepStoneSource",
    "BerlinStartupJobsSource",
    "ArbeitnowSource",
    "SOURCE_TYPES",
    "build_sources",
]


def build_sources(config: Settings, transport: httpx.AsyncBaseTransport | None = None) -> list[JobSource]:
    sources: list[JobSource] = []
    for name in config.enabled_sources:
        source_type = SOURCE_TYPES.get(name)
        if source_type is None:
            logger.warning("Unknown job source %r in configuration; skipping", name)
            continue
        if source_type is SerpApiSource and not config.serpapi_key:
            logger.info("SERPAPI_KEY not set; skipping source serpapi")
            continue
        sources.append(source_type(config, transport=transport))
        logger.info("Registered job source: %s", name)
    return sources
