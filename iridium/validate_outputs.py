"""Validate produced PDFs and write the machine-readable run report.

**Input Contract:**
- Reads PDF files written by the output writer during this run.

**Output Contract:**
- ``validate_pdfs`` returns one PdfCheck per file with its page count and
  title metadata, and a warning for anything unexpected.
- ``write_report`` writes a JSON document with the run counts, per-job
  outcomes, and the PDF checks.

**Error Handling:**
- An unreadable PDF is recorded as a warning, not raised; the run has already
  finished writing and the report must still be produced.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .data_models import RunSummary
from .enums import RenderMode

LOG = logging.getLogger(__name__)


@dataclass
class PdfCheck:
    """Result of re-opening one produced PDF.

    Attributes
    ----------
    path : str
        PDF file path.
    page_count : int
        Number of pages (0 when unreadable).
    title : str | None
        Title recorded in the document metadata.
    warnings : List[str]
        Problems found (unreadable, no pages, title mismatch).
    """

    path: str
    page_count: int
    title: Optional[str]
    warnings: List[str]

    @property
    def passed(self) -> bool:
        return not self.warnings


def check_pdf(path: Path) -> PdfCheck:
    """Open a PDF with pypdf and check its pages and title.

    The expected title is the file's stem, which is what the output writer
    records for every document.
    """
    warnings: List[str] = []
    try:
        reader = PdfReader(str(path))
        page_count = len(reader.pages)
        metadata = reader.metadata
        title = metadata.title if metadata is not None else None
    except (OSError, PyPdfError) as exc:
        return PdfCheck(
            path=str(path), page_count=0, title=None, warnings=[f"unreadable: {exc}"]
        )

    if page_count == 0:
        warnings.append("document has no pages")
    if title != path.stem:
        warnings.append(f"title {title!r} does not match {path.stem!r}")

    return PdfCheck(path=str(path), page_count=page_count, title=title, warnings=warnings)


def validate_pdfs(paths: Iterable[Path]) -> List[PdfCheck]:
    """Check every ``.pdf`` in ``paths``; other files are ignored."""
    checks = [check_pdf(path) for path in paths if path.suffix.lower() == ".pdf"]
    for check in checks:
        for warning in check.warnings:
            LOG.warning("%s: %s", check.path, warning)
    return checks


def build_report(
    summary: RunSummary,
    mode: RenderMode,
    pdf_checks: Optional[List[PdfCheck]] = None,
) -> dict:
    """Assemble the JSON-serializable run report."""
    pdf_checks = pdf_checks or []
    return {
        "mode": mode.value,
        "discovered": summary.discovered,
        "migrated": summary.migrated,
        "compiled": summary.compiled,
        "failed": summary.failed,
        "jobs": [
            {
                "source": str(result.job.source),
                "destination": str(result.job.destination),
                "outputs": [str(path) for path in result.outputs],
                "error": result.error,
            }
            for result in summary.results
        ],
        "pdf_validation": {
            "total_pdfs": len(pdf_checks),
            "passed_count": sum(1 for check in pdf_checks if check.passed),
            "results": [asdict(check) for check in pdf_checks],
        },
    }


def write_report(
    summary: RunSummary,
    mode: RenderMode,
    target: Path,
    pdf_checks: Optional[List[PdfCheck]] = None,
) -> Path:
    """Write the run report as JSON to ``target``."""
    payload = build_report(summary, mode, pdf_checks)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return target
