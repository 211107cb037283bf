"""Validation run -- hydrate and validate every Candidate, then aggregate."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from kubevalidator.annotations.builder import sort_annotations
from kubevalidator.annotations.models import Annotation
from kubevalidator.candidate import Candidate
from kubevalidator.content import ContentSource
from kubevalidator.localizer.engine import DEFAULT_POLICY
from kubevalidator.localizer.strategies import EditPolicy
from kubevalidator.report.aggregator import build_final_report
from kubevalidator.report.models import Report
from kubevalidator.validator.engine import SchemaStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


async def process_candidate(
    candidate: Candidate,
    source: ContentSource,
    ref: str,
    store: SchemaStore,
    policy: EditPolicy = DEFAULT_POLICY,
) -> list[Annotation]:
    """Load then validate one candidate; a load failure ends it with one annotation."""
    load_error = await candidate.load_bytes(source, ref)
    if load_error is not None:
        return [load_error]
    return await candidate.validate(store, policy)


async def run_validation(
    candidates: list[Candidate],
    source: ContentSource,
    ref: str,
    store: SchemaStore,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    policy: EditPolicy = DEFAULT_POLICY,
) -> list[Annotation]:
    """Validate all candidates with bounded concurrency.

    The combined annotation list is sorted, so its order never depends on
    which candidate finished first.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _bounded(candidate: Candidate) -> list[Annotation]:
        async with semaphore:
            return await process_candidate(candidate, source, ref, store, policy)

    results = await asyncio.gather(*(_bounded(c) for c in candidates))
    annotations = sort_annotations([a for result in results for a in result])
    logger.info(
        "Validated %d file(s) at %s: %d annotation(s)",
        len(candidates), ref, len(annotations),
    )
    return annotations


def build_report(
    candidates: list[Candidate],
    annotations: list[Annotation],
    started_at: datetime,
    completed_at: datetime,
    config_url: str = "",
) -> Report:
    ordered = sorted(candidates, key=lambda c: c.filename)
    return build_final_report(
        candidate_count=len(candidates),
        annotations=annotations,
        list_items=[c.markdown_list_item() for c in ordered],
        started_at=started_at,
        completed_at=completed_at,
        config_url=config_url,
    )
