"""Rewrite intra-site document links for a render target.

Rendered Markdown keeps the links its author wrote, so ``[next](b.md)`` becomes
``<a href="b.md">``. That only resolves in the source tree. This module maps
those references onto the files the output writer actually produces:

- ``html`` target: ``b.md`` -> ``b.html``
- ``pdf`` target: ``b.md`` -> ``b.pdf``

Only ``href`` attributes of anchor elements are touched. Absolute URLs,
protocol-relative URLs, same-page fragments and links to anything that is not
a Markdown source (images, stylesheets, existing PDFs, directories) pass
through unchanged, as does any value ``urlsplit`` refuses to parse.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from urllib.parse import urlsplit, urlunsplit

from .enums import RenderTarget

MARKDOWN_SUFFIXES = {".md", ".markdown"}

# <a ... href="..."> with either quote style; attribute order is irrelevant.
# The whitespace before href keeps data-href and xlink:href out.
_ANCHOR_HREF = re.compile(
    r"""(<a\b[^>]*?\shref\s*=\s*)(?P<quote>["'])(?P<href>.*?)(?P=quote)""",
    re.IGNORECASE | re.DOTALL,
)


def is_markdown_path(path: str) -> bool:
    """Check whether a path names a Markdown source (case-insensitive)."""
    return PurePosixPath(path).suffix.lower() in MARKDOWN_SUFFIXES


def rewrite_href(href: str, target: RenderTarget) -> str:
    """Rewrite a single link value for the given target.

    Parameters
    ----------
    href : str
        Raw attribute value as it appears in the rendered HTML.
    target : RenderTarget
        Target the document is being prepared for.

    Returns
    -------
    str
        The rewritten value, or ``href`` unchanged when it does not point at
        another Markdown document in the set.

    Examples
    --------
    >>> rewrite_href("guide/setup.md#install", RenderTarget.HTML)
    'guide/setup.html#install'
    >>> rewrite_href("setup.markdown", RenderTarget.PDF)
    'setup.pdf'
    >>> rewrite_href("https://example.com/readme.md", RenderTarget.HTML)
    'https://example.com/readme.md'
    """
    if not href or href.startswith("#"):
        return href

    try:
        parts = urlsplit(href)
    except ValueError:
        return href

    if parts.scheme or parts.netloc:
        return href

    if not is_markdown_path(parts.path):
        return href

    path = str(PurePosixPath(parts.path).with_suffix(target.suffix))
    # PurePosixPath drops a leading "./"; keep the author's form.
    if parts.path.startswith("./") and not path.startswith("./"):
        path = f"./{path}"

    if target is RenderTarget.PDF:
        # A standalone PDF has no query string routing.
        return urlunsplit(("", "", path, "", parts.fragment))
    return urlunsplit(("", "", path, parts.query, parts.fragment))


def relink(html: str, target: RenderTarget | str) -> str:
    """Rewrite every internal document link in ``html`` for ``target``.

    Pure function: returns a new string and never mutates shared state, so it
    is called once per target on the same source HTML when both formats are
    requested.

    Parameters
    ----------
    html : str
        Complete rendered document.
    target : RenderTarget | str
        Target enum, or its string tag ('html' or 'pdf').

    Returns
    -------
    str
        Document with links rewritten for the target.

    Raises
    ------
    ValueError
        If ``target`` is a string that names no known target.
    """
    if not isinstance(target, RenderTarget):
        target = RenderTarget.from_string(target)

    def _replace(match: re.Match) -> str:
        quote = match.group("quote")
        href = rewrite_href(match.group("href"), target)
        return f"{match.group(1)}{quote}{href}{quote}"

    return _ANCHOR_HREF.sub(_replace, html)
