"""Enumerations for the Iridium build pipeline."""

from enum import Enum


class RenderTarget(Enum):
    """Output format a rendered document is written as.

    Each target carries its own link-rewriting rules (see
    ``link_rewriter.relink``) and its own output file suffix.
    """

    HTML = "html"
    PDF = "pdf"

    @property
    def suffix(self) -> str:
        """File suffix for outputs of this target (e.g. ``.html``)."""
        return f".{self.value}"

    @classmethod
    def from_string(cls, value: str | None) -> "RenderTarget":
        """Convert string to RenderTarget.

        Parameters
        ----------
        value : str | None
            Target name ('html', 'pdf'), or None for default (HTML).
            Case-insensitive.

        Returns
        -------
        RenderTarget
            Corresponding RenderTarget enum value.

        Raises
        ------
        ValueError
            If value is not a valid target name.
        """
        if value is None:
            return cls.HTML

        value_lower = value.lower()
        for target in cls:
            if target.value == value_lower:
                return target

        raise ValueError(
            f"Unknown render target: {value}. "
            f"Valid options: {', '.join(t.value for t in cls)}"
        )


class RenderMode(Enum):
    """Global format set for one run.

    Exactly one mode governs a run. It is chosen from the CLI flags before any
    file is processed and never changes afterwards.

    Attributes
    ----------
    HTML_ONLY : str
        Default; one ``.html`` file per Markdown source.
    PDF_ONLY : str
        ``--pdf``; one ``.pdf`` file per Markdown source.
    MIRROR : str
        ``--pdf-mirror``; a ``.pdf`` and an ``.html`` file per source.
    """

    HTML_ONLY = "html"
    PDF_ONLY = "pdf"
    MIRROR = "pdf-mirror"

    @classmethod
    def from_flags(cls, pdf: bool, pdf_mirror: bool) -> "RenderMode":
        """Derive the run mode from the ``--pdf`` / ``--pdf-mirror`` flags.

        Mirror mode wins when both flags are given.

        Examples
        --------
        >>> RenderMode.from_flags(pdf=False, pdf_mirror=False)
        <RenderMode.HTML_ONLY: 'html'>
        >>> RenderMode.from_flags(pdf=True, pdf_mirror=True)
        <RenderMode.MIRROR: 'pdf-mirror'>
        """
        if pdf_mirror:
            return cls.MIRROR
        if pdf:
            return cls.PDF_ONLY
        return cls.HTML_ONLY

    @property
    def targets(self) -> tuple[RenderTarget, ...]:
        """Targets written for every job, in write order (PDF before HTML)."""
        mapping = {
            RenderMode.HTML_ONLY: (RenderTarget.HTML,),
            RenderMode.PDF_ONLY: (RenderTarget.PDF,),
            RenderMode.MIRROR: (RenderTarget.PDF, RenderTarget.HTML),
        }
        return mapping[self]

    @property
    def needs_pdf(self) -> bool:
        return RenderTarget.PDF in self.targets

    @property
    def label(self) -> str:
        """Human-readable mode name printed at the start of a run."""
        labels = {
            RenderMode.HTML_ONLY: "HTML Mode",
            RenderMode.PDF_ONLY: "PDF Mode",
            RenderMode.MIRROR: "PDF Mirror Mode",
        }
        return labels[self]
