"""PDF rendering engine handle.

Wraps WeasyPrint behind a small, explicitly owned resource. The orchestrator
opens one engine per run and passes it by reference to the output writer::

    with PdfEngine(options) as engine:
        engine.render(html, Path("out/a.pdf"), title="a")

The engine is not shared across threads. A parallel build would need one
engine per worker.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .data_models import PdfOptions

LOG = logging.getLogger(__name__)


class PdfRenderError(Exception):
    """The PDF engine failed to build or save a document."""


def page_css(options: PdfOptions) -> str:
    """Build the ``@page`` rule applied to every PDF.

    Examples
    --------
    >>> page_css(PdfOptions())
    '@page { size: A4 landscape; margin: 0mm; }'
    """
    margin = f"{options.margin_mm:g}mm"
    return f"@page {{ size: {options.page_size} {options.orientation}; margin: {margin}; }}"


class PdfEngine:
    """Scoped WeasyPrint handle.

    WeasyPrint is imported when the engine is opened, not at module import,
    so HTML-only runs never load its native dependencies.
    """

    def __init__(self, options: Optional[PdfOptions] = None):
        self.options = options or PdfOptions()
        self._weasyprint = None
        self._stylesheet = None

    def open(self) -> "PdfEngine":
        if self._weasyprint is None:
            try:
                import weasyprint
            except (ImportError, OSError) as exc:
                raise PdfRenderError(f"failed to load WeasyPrint: {exc}") from exc

            self._weasyprint = weasyprint
            self._stylesheet = weasyprint.CSS(string=page_css(self.options))
            LOG.debug("Opened PDF engine (WeasyPrint %s)", weasyprint.__version__)
        return self

    def close(self) -> None:
        self._weasyprint = None
        self._stylesheet = None

    def __enter__(self) -> "PdfEngine":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def render(self, html: str, output_path: Path, title: str) -> Path:
        """Render ``html`` to a PDF file at ``output_path``.

        Parameters
        ----------
        html : str
            PDF-ready page (links already rewritten for the pdf target).
        output_path : Path
            Destination ``.pdf`` file; its parent must exist.
        title : str
            Document title recorded in the PDF metadata.

        Raises
        ------
        PdfRenderError
            If the engine is not open, or WeasyPrint fails to build or save
            the document.
        """
        if self._weasyprint is None:
            raise PdfRenderError("PDF engine is not open")

        # Relative image references resolve against the copied assets.
        base_url = str(output_path.parent)
        try:
            document = self._weasyprint.HTML(string=html, base_url=base_url).render(
                stylesheets=[self._stylesheet]
            )
            document.metadata.title = title
            document.write_pdf(str(output_path))
        except Exception as exc:
            raise PdfRenderError(f"failed to build {output_path.name}: {exc}") from exc
        return output_path
