"""Shared pytest fixtures for unit, integration, and e2e tests.

This module provides:
- Temporary directory fixtures for file I/O testing
- Sample Markdown trees shaped like real documentation sites
- Configuration fixtures for parameter testing
- Fake PDF engines so tests do not need WeasyPrint's native libraries
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from iridium.data_models import BuildOptions
from iridium.enums import RenderMode
from tests.fixtures.fake_engines import FakePdfEngine


@pytest.fixture
def tmp_test_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after each test.

    Real-world significance:
    - Isolates file I/O tests from each other
    - Prevents test artifacts from polluting the file system

    Yields
    ------
    Path
        Absolute path to temporary directory (automatically deleted after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def sample_site(tmp_test_dir: Path) -> Dict[str, Path]:
    """Create a small documentation tree with nested pages and an asset.

    Layout::

        docs/
          index.md          links to guide/setup.md and an image
          guide/setup.md    links back to ../index.md#welcome
          guide/notes.markdown
          images/logo.png   non-Markdown asset

    Returns
    -------
    Dict[str, Path]
        Keys: 'docs', 'out', 'index', 'setup', 'notes', 'logo'
    """
    docs = tmp_test_dir / "docs"
    (docs / "guide").mkdir(parents=True)
    (docs / "images").mkdir()

    index = docs / "index.md"
    index.write_text(
        "# Welcome\n\n"
        "Start with the [setup guide](guide/setup.md).\n\n"
        "![logo](images/logo.png)\n\n"
        "See [the project](https://example.com/readme.md).\n",
        encoding="utf-8",
    )
    setup = docs / "guide" / "setup.md"
    setup.write_text(
        "# Setup\n\nBack to [home](../index.md#welcome).\n", encoding="utf-8"
    )
    notes = docs / "guide" / "notes.markdown"
    notes.write_text("# Notes\n\nPlain notes.\n", encoding="utf-8")
    logo = docs / "images" / "logo.png"
    logo.write_bytes(b"\x89PNG\r\n\x1a\nfake-image")

    return {
        "docs": docs,
        "out": tmp_test_dir / "site",
        "index": index,
        "setup": setup,
        "notes": notes,
        "logo": logo,
    }


@pytest.fixture
def default_config() -> Dict[str, Any]:
    """Provide a minimal configuration matching config/parameters.yaml.

    Returns
    -------
    Dict[str, Any]
        Configuration dict with all standard sections
    """
    return {
        "render": {
            "theme": "iridium",
            "watermark": True,
        },
        "markdown": {
            "extensions": ["extra", "sane_lists"],
        },
        "pdf": {
            "page_size": "A4",
            "orientation": "landscape",
            "margin_mm": 0,
            "validate": True,
        },
        "logging": {
            "level": "INFO",
        },
    }


@pytest.fixture
def config_file(tmp_test_dir: Path, default_config: Dict[str, Any]) -> Path:
    """Create a temporary config file with default configuration.

    Returns
    -------
    Path
        Path to created YAML config file
    """
    config_path = tmp_test_dir / "parameters.yaml"
    with open(config_path, "w") as f:
        yaml.dump(default_config, f)
    return config_path


@pytest.fixture
def fake_engine() -> FakePdfEngine:
    return FakePdfEngine()


@pytest.fixture
def make_options(sample_site: Dict[str, Path]):
    """Factory for BuildOptions rooted at the sample site.

    Examples
    --------
    >>> def test_mirror(make_options):
    ...     options = make_options(mode=RenderMode.MIRROR)
    """

    def _make(**overrides: Any) -> BuildOptions:
        values: Dict[str, Any] = {
            "input_path": sample_site["docs"],
            "output_dir": sample_site["out"],
            "mode": RenderMode.HTML_ONLY,
        }
        values.update(overrides)
        return BuildOptions(**values)

    return _make


@pytest.fixture
def patch_engine(monkeypatch: pytest.MonkeyPatch):
    """Replace the orchestrator's PdfEngine with a given fake instance."""
    from iridium import orchestrator

    def _patch(engine: FakePdfEngine) -> FakePdfEngine:
        monkeypatch.setattr(orchestrator, "PdfEngine", lambda options: engine)
        return engine

    return _patch
