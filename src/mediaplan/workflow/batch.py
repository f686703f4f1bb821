"""Batch planning over a fixed-size worker pool.

Each file is probed and planned on a ThreadPoolExecutor worker. Planners
are pure, so the only shared state is the probe, whose implementations
are safe for concurrent use. Log records emitted while planning a file
carry a ``[Wnn:Fnnn]`` tag from the worker context.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from mediaplan.domain.enums import ContentType
from mediaplan.introspector.interface import MediaProbe
from mediaplan.logging import worker_context
from mediaplan.plan.builder import build_encoding_plan
from mediaplan.plan.collect import collect_probe_data
from mediaplan.plan.types import EncodingPlan
from mediaplan.policy.types import PlanningConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilePlanResult:
    """Outcome of planning one file in a batch."""

    path: Path
    plan: EncodingPlan | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.plan is not None


def plan_file(
    path: Path,
    probe: MediaProbe,
    config: PlanningConfig,
    content_type: ContentType | None = None,
) -> EncodingPlan:
    """Probe and plan a single file."""
    data = collect_probe_data(probe, path, config)
    return build_encoding_plan(path, data, config, content_type)


def _plan_single_file(
    path: Path,
    probe: MediaProbe,
    config: PlanningConfig,
    content_type: ContentType | None,
    worker_id: str,
    file_id: str,
) -> FilePlanResult:
    with worker_context(worker_id, file_id, path):
        logger.info("=== FILE %s: %s", file_id, path)
        try:
            plan = plan_file(path, probe, config, content_type)
        except Exception as e:
            logger.exception("Error planning %s: %s", path, e)
            return FilePlanResult(path=path, error=str(e))
        logger.debug(
            "Planned %s: %d filters, %d episodes",
            path.name,
            len(plan.filters),
            len(plan.episodes),
        )
        return FilePlanResult(path=path, plan=plan)


def plan_batch(
    paths: list[Path],
    probe: MediaProbe,
    config: PlanningConfig,
    workers: int = 2,
    content_type: ContentType | None = None,
) -> list[FilePlanResult]:
    """Plan many files concurrently.

    Args:
        paths: Source files to plan.
        probe: Media probe shared by all workers.
        config: Planning configuration.
        workers: Pool size (at least 1).
        content_type: Series or movie override for every file.

    Returns:
        One FilePlanResult per path, in input order. A file that fails
        yields an unsuccessful result without affecting the others.

    Raises:
        ValueError: If workers is less than 1.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    if not paths:
        return []

    effective_workers = min(workers, len(paths))
    file_id_width = len(str(len(paths)))

    with ThreadPoolExecutor(max_workers=effective_workers) as executor:
        futures = []
        for file_idx, path in enumerate(paths, start=1):
            # Worker ID is a logical slot, not the executing thread
            worker_id = f"{((file_idx - 1) % effective_workers) + 1:02d}"
            file_id = f"F{file_idx:0{file_id_width}d}"
            futures.append(
                executor.submit(
                    _plan_single_file,
                    path,
                    probe,
                    config,
                    content_type,
                    worker_id,
                    file_id,
                )
            )
        results = [future.result() for future in futures]

    failed = sum(1 for r in results if not r.success)
    logger.info(
        "Planned %d files (%d failed) with %d workers",
        len(results),
        failed,
        effective_workers,
    )
    return results
