"""Unified data models for the Iridium build pipeline.

This module provides the core dataclasses passed between pipeline steps. All of
them are frozen: a value built by one step is never modified by the next.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .enums import RenderMode


@dataclass(frozen=True)
class PdfOptions:
    """Page options handed to the PDF engine.

    Fields
    ------
    page_size : str
        CSS page size keyword (e.g. 'A4', 'letter').
    orientation : str
        'landscape' or 'portrait'.
    margin_mm : float
        Page margin on every side, in millimetres.
    """

    page_size: str = "A4"
    orientation: str = "landscape"
    margin_mm: float = 0


@dataclass(frozen=True)
class BuildOptions:
    """Immutable configuration for one run.

    Built once by the orchestrator from CLI flags and the YAML configuration,
    then passed explicitly to every step. Nothing re-reads the flags later.

    Fields
    ------
    input_path : Path
        Canonicalized input file or directory.
    output_dir : Path
        Root directory outputs are written into.
    mode : RenderMode
        Format set for every job in the run.
    watermark : bool
        Whether the attribution block is appended to rendered pages.
    theme : str
        Requested theme name (resolved with fallback by ``themes.load_theme``).
    markdown_extensions : Tuple[str, ...]
        Python-Markdown extension names.
    highlight_script : str
        URL of the syntax-highlighting script referenced from every page.
    pdf : PdfOptions
        Page options for the PDF engine.
    validate_pdfs : bool
        Whether produced PDFs are re-opened with pypdf after the run.
    report_path : Optional[Path]
        Where to write the JSON run report, or None to skip it.
    """

    input_path: Path
    output_dir: Path
    mode: RenderMode = RenderMode.HTML_ONLY
    watermark: bool = True
    theme: str = "iridium"
    markdown_extensions: Tuple[str, ...] = ("extra", "sane_lists")
    highlight_script: str = (
        "//cdnjs.cloudflare.com/ajax/libs/highlight.js/10.1.2/highlight.min.js"
    )
    pdf: PdfOptions = field(default_factory=PdfOptions)
    validate_pdfs: bool = True
    report_path: Optional[Path] = None


@dataclass(frozen=True)
class RenderJob:
    """One unit of work: a source file and its destination.

    ``destination`` still carries the source suffix (``.md``); the output
    writer swaps it for the suffix of each requested target.
    """

    source: Path
    destination: Path


@dataclass(frozen=True)
class RenderedDocument:
    """A complete HTML page plus the display title derived from its filename."""

    html: str
    title: str


@dataclass(frozen=True)
class JobResult:
    """Outcome of processing one RenderJob.

    Parameters
    ----------
    job : RenderJob
        The job that was processed.
    outputs : List[Path]
        Files written for the job (empty when it failed before writing).
    error : Optional[str]
        Failure description, or None when the job succeeded.
    """

    job: RenderJob
    outputs: List[Path]
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunSummary:
    """Aggregate counts for a completed run.

    Parameters
    ----------
    discovered : int
        Files found under the input path.
    migrated : int
        Files accounted for: copied assets plus Markdown jobs that succeeded.
    compiled : int
        Output documents written (one per format per successful job).
    results : List[JobResult]
        Per-job outcomes in processing order.
    """

    discovered: int
    migrated: int
    compiled: int
    results: List[JobResult]

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.succeeded)
