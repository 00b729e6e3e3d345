"""Copy non-Markdown files into the output tree.

Images, stylesheets, downloads and any other file that is not a Markdown
source are copied byte-for-byte to their destination, preserving the
directory structure. Markdown jobs are returned untouched for rendering.

**Error Handling:**
- A file that cannot be copied is logged and recorded as a failure; the
  remaining files are still copied (per-item recovery).
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from .data_models import RenderJob
from .link_rewriter import is_markdown_path

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationResult:
    """Outcome of the asset migration step.

    Parameters
    ----------
    render_jobs : List[RenderJob]
        Markdown jobs still requiring full rendering, in input order.
    copied : List[Path]
        Destination paths of copied assets.
    failures : List[Tuple[RenderJob, str]]
        Assets that could not be copied, with the reason.
    """

    render_jobs: List[RenderJob]
    copied: List[Path]
    failures: List[Tuple[RenderJob, str]]


def copy_asset(job: RenderJob) -> Path:
    """Copy one asset to its destination, replacing any previous copy.

    An asset whose destination is its own source (in-place build) is left
    where it is.
    """
    if job.source == job.destination:
        LOG.debug("Asset already in place: %s", job.source)
        return job.destination
    job.destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(job.source, job.destination)
    return job.destination


def migrate_assets(jobs: Iterable[RenderJob]) -> MigrationResult:
    """Copy every non-Markdown job and return the Markdown jobs.

    Parameters
    ----------
    jobs : Iterable[RenderJob]
        All jobs discovered by the tree walker.

    Returns
    -------
    MigrationResult
        Markdown jobs to render plus the copy outcome for assets.
    """
    render_jobs: List[RenderJob] = []
    copied: List[Path] = []
    failures: List[Tuple[RenderJob, str]] = []

    for job in jobs:
        if is_markdown_path(job.source.name):
            render_jobs.append(job)
            continue
        try:
            copied.append(copy_asset(job))
        except OSError as exc:
            LOG.error("Failed to copy asset %s: %s", job.source, exc)
            failures.append((job, str(exc)))

    return MigrationResult(render_jobs=render_jobs, copied=copied, failures=failures)
