"""Render one Markdown document into a complete, themed HTML page.

The page is assembled from a fixed skeleton:

- head: charset, title, the syntax-highlighting script reference and its
  initialisation call, and the theme stylesheet inlined in a ``<style>`` block
- body: the transformed Markdown inside ``<div class="container">``, the
  optional watermark block, and the heading-anchor navigation script

The navigation script gives every heading an anchor id derived from its text,
scrolls to ``location.hash`` on load and updates the hash when a heading is
clicked, so sections can be deep-linked. Rendering is pure: no file access.
"""

from __future__ import annotations

import html
from pathlib import Path
from typing import Sequence

import markdown

from .data_models import RenderedDocument

WATERMARK = (
    '<div class="iridium-watermark" style="text-align: center; padding: 1em; '
    'color: #aaa"><h4>Powered by '
    '<a href="https://github.com/fatalcenturion/Iridium">Iridium</a></h4></div>'
)

NAVIGATION_SCRIPT = """
document.addEventListener('DOMContentLoaded', function () {
  function anchorId(text) {
    return text.toLowerCase().replace(/[^\\w\\s-]/g, '').trim().split(/\\s+/).join('-');
  }
  function currentTarget() {
    return decodeURIComponent(window.location.hash.replace(/^#/, '').replace(/\\?.*$/, ''));
  }
  function scrollToTarget() {
    var target = currentTarget();
    if (!target) return;
    var anchor = document.getElementById(target);
    if (anchor !== null) {
      (anchor.parentElement || anchor).scrollIntoView({ behavior: 'instant', block: 'start' });
    }
  }
  document.querySelectorAll('h1, h2, h3, h4, h5, h6').forEach(function (heading) {
    var id = anchorId(heading.innerText);
    if (!id || document.getElementById(id) !== null) return;
    var anchor = document.createElement('span');
    anchor.className = 'anchor';
    anchor.id = id;
    heading.appendChild(anchor);
    heading.addEventListener('click', function () {
      window.location.hash = id;
      scrollToTarget();
    });
  });
  scrollToTarget();
}, false);
"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>__TITLE__</title>
<script src="__HIGHLIGHT_SCRIPT__"></script>
<script>hljs.initHighlightingOnLoad();</script>
<style>__STYLESHEET__</style>
</head>
<body>
<div class="container">
__BODY__
</div>
__WATERMARK__
<script>__NAVIGATION_SCRIPT__</script>
</body>
</html>
"""


def display_title(source: Path) -> str:
    """Derive a document's display title from its filename (suffix stripped)."""
    return Path(source).stem


def markdown_to_html(text: str, extensions: Sequence[str] = ()) -> str:
    """Transform Markdown text into an HTML fragment with Python-Markdown."""
    return markdown.markdown(text, extensions=list(extensions))


def render_document(
    text: str,
    title: str,
    *,
    stylesheet: str,
    watermark: bool = True,
    extensions: Sequence[str] = (),
    highlight_script: str = (
        "//cdnjs.cloudflare.com/ajax/libs/highlight.js/10.1.2/highlight.min.js"
    ),
) -> RenderedDocument:
    """Render raw Markdown into a complete HTML page.

    Parameters
    ----------
    text : str
        Raw Markdown source.
    title : str
        Display title (see display_title); used for ``<title>`` and the PDF.
    stylesheet : str
        Theme CSS, inlined as-is.
    watermark : bool
        Append the attribution block when True.
    extensions : Sequence[str]
        Python-Markdown extension names.
    highlight_script : str
        URL of the highlight.js script referenced from the page head.

    Returns
    -------
    RenderedDocument
        The page and its title. Links are left as written; run the result
        through ``link_rewriter.relink`` for each target.
    """
    body = markdown_to_html(text, extensions)
    page = (
        PAGE_TEMPLATE.replace("__TITLE__", html.escape(title))
        .replace("__HIGHLIGHT_SCRIPT__", html.escape(highlight_script, quote=True))
        .replace("__STYLESHEET__", stylesheet)
        .replace("__WATERMARK__", WATERMARK if watermark else "")
        .replace("__NAVIGATION_SCRIPT__", NAVIGATION_SCRIPT)
        # Body last so placeholder-like text inside documents is left alone.
        .replace("__BODY__", body)
    )
    return RenderedDocument(html=page, title=title)
