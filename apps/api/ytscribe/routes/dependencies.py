"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from ytscribe.adapters.factory import build_media_source, build_summarizer
from ytscribe.adapters.media import MetadataResolver
from ytscribe.adapters.summarization import Summarizer
from ytscribe.core.config import Settings, get_settings
from ytscribe.repositories.memory import JobStore
from ytscribe.services.jobs import JobService


def get_store(request: Request) -> JobStore:
    return request.app.state.store


def get_metadata_resolver(settings: Annotated[Settings, Depends(get_settings)]) -> MetadataResolver:
    return build_media_source(settings)


def get_summarizer(settings: Annotated[Settings, Depends(get_settings)]) -> Summarizer:
    return build_summarizer(settings)


def get_job_service(
    store: Annotated[JobStore, Depends(get_store)],
    resolver: Annotated[MetadataResolver, Depends(get_metadata_resolver)],
    summarizer: Annotated[Summarizer, Depends(get_summarizer)],
) -> JobService:
    return JobService(store, resolver=resolver, summarizer=summarizer)


def get_query_service(store: Annotated[JobStore, Depends(get_store)]) -> JobService:
    """Read-only service; skips building collaborators for list/detail requests."""
    return JobService(store)
