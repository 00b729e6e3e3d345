"""Write rendered documents to their output files.

For every requested target the destination suffix (``.md`` / ``.markdown``)
is replaced by the target suffix, any file already at that path is deleted,
and the new file is written:

- pdf: the PDF-ready page goes through the PdfEngine (landscape, zero margin,
  title from the document's display name)
- html: the page is written as UTF-8 text

Targets are written in the order given by the run mode (PDF before HTML).

**Error Handling:**
- Filesystem errors (OSError) and PdfRenderError propagate to the caller; the
  orchestrator turns them into a failed job and continues with the next one.

**Concurrency:**
- Replacement is delete-then-create, not an atomic rename. A concurrent
  reader can briefly see the file missing. Parallel builds would need a lock
  per destination path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .enums import RenderMode, RenderTarget
from .link_rewriter import MARKDOWN_SUFFIXES
from .pdf_engine import PdfEngine, PdfRenderError

LOG = logging.getLogger(__name__)


def output_path(destination: Path, target: RenderTarget) -> Path:
    """Swap the Markdown suffix of ``destination`` for the target suffix.

    Examples
    --------
    >>> output_path(Path("site/guide.markdown"), RenderTarget.PDF)
    PosixPath('site/guide.pdf')
    >>> output_path(Path("site/notes.md.md"), RenderTarget.HTML)
    PosixPath('site/notes.md.html')
    """
    destination = Path(destination)
    if destination.suffix.lower() in MARKDOWN_SUFFIXES:
        return destination.with_suffix(target.suffix)
    return destination.with_name(destination.name + target.suffix)


def prepare_destination(path: Path) -> None:
    """Make ``path`` writable: delete an existing file or create its parents."""
    if path.exists() or path.is_symlink():
        LOG.debug("Replacing %s", path)
        path.unlink()
    else:
        path.parent.mkdir(parents=True, exist_ok=True)


def write_html(path: Path, html: str) -> Path:
    prepare_destination(path)
    path.write_text(html, encoding="utf-8")
    return path


def write_pdf(path: Path, html: str, title: str, engine: PdfEngine) -> Path:
    prepare_destination(path)
    return engine.render(html, path, title)


def write_outputs(
    destination: Path,
    html: str,
    pdf_html: Optional[str],
    title: str,
    mode: RenderMode,
    engine: Optional[PdfEngine] = None,
    written: Optional[List[Path]] = None,
) -> List[Path]:
    """Write every output file for one job.

    Parameters
    ----------
    destination : Path
        Job destination, still carrying the source suffix.
    html : str
        Page with links rewritten for the html target.
    pdf_html : str, optional
        Page with links rewritten for the pdf target. Required when the mode
        includes PDF output.
    title : str
        Display title used as the PDF title.
    mode : RenderMode
        Format set for the run.
    engine : PdfEngine, optional
        Open engine handle. Required when the mode includes PDF output.
    written : List[Path], optional
        List that each file is appended to as soon as it is written, so a
        caller still knows what reached disk when a later target fails.

    Returns
    -------
    List[Path]
        Files written, in write order.

    Raises
    ------
    PdfRenderError
        If PDF output is requested without an engine or page, or the engine
        fails.
    OSError
        If a file cannot be deleted or written.
    """
    if written is None:
        written = []
    for target in mode.targets:
        path = output_path(destination, target)
        if target is RenderTarget.PDF:
            if engine is None or pdf_html is None:
                raise PdfRenderError(
                    f"PDF output requested for {destination} without a PDF engine"
                )
            write_pdf(path, pdf_html, title, engine)
            print(f"Compiled: {path} (PDF)")
        else:
            write_html(path, html)
            print(f"Compiled: {path} (HTML)")
        written.append(path)
    return written
