"""Discover source files and compute their output destinations.

**Input Contract:**
- The input path is either a single file or a directory.
- The input path must canonicalize; otherwise the run aborts.

**Output Contract:**
- One RenderJob per regular file, sorted by source path.
- ``job.destination == output_dir / job.source.relative_to(root)`` where
  ``root`` is the input directory, or the parent of a single input file.
- All destinations are computed here, before any rendering starts.

**Error Handling:**
- Canonicalization failure raises InputResolutionError (fatal).
- A directory that cannot be listed is logged and skipped; the walk continues.

**In-place builds:**
- When the output directory is the input directory, the .html/.pdf files a
  previous build wrote next to each Markdown source are not rediscovered.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Set, Tuple

from .data_models import RenderJob
from .enums import RenderTarget
from .link_rewriter import is_markdown_path
from .output_writer import output_path

LOG = logging.getLogger(__name__)


class InputResolutionError(Exception):
    """The input path could not be canonicalized or stat'ed."""


def resolve_input(input_path: Path) -> Path:
    """Canonicalize the input path.

    Raises
    ------
    InputResolutionError
        If the path does not exist or cannot be resolved.
    """
    try:
        resolved = Path(input_path).resolve(strict=True)
        resolved.stat()
    except (OSError, RuntimeError) as exc:
        raise InputResolutionError(
            f"Failed to canonicalize {input_path}: {exc}"
        ) from exc
    return resolved


def _log_walk_error(exc: OSError) -> None:
    LOG.warning("Unable to open %s: %s", exc.filename, exc)


def discover_files(directory: Path, exclude: Path | None = None) -> List[Path]:
    """Recursively list every regular file beneath ``directory``.

    Nested directories are flattened into one sorted list. ``exclude`` names a
    directory that is never descended into, used to keep an output directory
    nested inside the input tree from being re-read as input.
    """
    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_log_walk_error):
        current = Path(dirpath)
        if exclude is not None:
            dirnames[:] = [d for d in dirnames if current / d != exclude]
        dirnames.sort()
        for name in filenames:
            candidate = current / name
            if candidate.is_file():
                files.append(candidate)
    return sorted(files)


def destination_for(source: Path, root: Path, output_dir: Path) -> Path:
    """Map a source file to its destination under ``output_dir``.

    Examples
    --------
    >>> destination_for(Path("/docs/sub/y.md"), Path("/docs"), Path("/out"))
    PosixPath('/out/sub/y.md')
    """
    return Path(output_dir) / Path(source).relative_to(root)


def generated_outputs(sources: List[Path]) -> Set[Path]:
    """Paths a previous in-place build would have written for these sources."""
    return {
        output_path(source, target)
        for source in sources
        if is_markdown_path(source.name)
        for target in RenderTarget
    }


def walk(input_path: Path, output_dir: Path) -> Tuple[Path, List[RenderJob]]:
    """Build the RenderJobs for an input file or directory.

    Parameters
    ----------
    input_path : Path
        Canonicalized input file or directory (see resolve_input).
    output_dir : Path
        Output root.

    Returns
    -------
    Tuple[Path, List[RenderJob]]
        The root that destinations are relative to, and the jobs.
    """
    output_dir = Path(output_dir).resolve()
    if input_path.is_dir():
        root = input_path
        sources = discover_files(input_path, exclude=output_dir)
        if output_dir == root:
            # Building in place: earlier outputs sit beside their sources.
            generated = generated_outputs(sources)
            sources = [source for source in sources if source not in generated]
    else:
        root = input_path.parent
        sources = [input_path]

    jobs = [
        RenderJob(source=source, destination=destination_for(source, root, output_dir))
        for source in sources
    ]
    return root, jobs
