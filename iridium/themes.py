"""Theme stylesheet lookup.

Themes are plain CSS files bundled under ``iridium/themes/``. A theme is
resolved once per run and inlined into every page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

THEMES_DIR = Path(__file__).resolve().parent / "themes"
DEFAULT_THEME = "iridium"

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    """A named stylesheet.

    ``requested`` keeps the name the user asked for so a fallback can be
    reported; ``name`` is the theme actually used.
    """

    name: str
    stylesheet: str
    requested: str

    @property
    def is_fallback(self) -> bool:
        return self.name != self.requested.strip().lower()


def available_themes(themes_dir: Path = THEMES_DIR) -> list[str]:
    return sorted(path.stem for path in themes_dir.glob("*.css"))


def load_theme(name: str | None, themes_dir: Path = THEMES_DIR) -> Theme:
    """Resolve a theme name to its stylesheet.

    Lookup is case-insensitive. An unrecognized name is not an error: a
    warning is logged and the default theme is used instead.

    Parameters
    ----------
    name : str | None
        Theme name from the CLI or configuration. None selects the default.
    themes_dir : Path
        Directory holding ``<name>.css`` files.

    Returns
    -------
    Theme
        The resolved theme.

    Raises
    ------
    FileNotFoundError
        If neither the requested theme nor the default theme exists.
    """
    requested = name or DEFAULT_THEME
    key = requested.strip().lower()
    stylesheet_path = themes_dir / f"{key}.css"

    if not key or "/" in key or "\\" in key or not stylesheet_path.is_file():
        LOG.warning(
            "Unknown theme %r; falling back to %r. Available: %s",
            requested,
            DEFAULT_THEME,
            ", ".join(available_themes(themes_dir)) or "none",
        )
        key = DEFAULT_THEME
        stylesheet_path = themes_dir / f"{DEFAULT_THEME}.css"
        if not stylesheet_path.is_file():
            raise FileNotFoundError(
                f"Default theme stylesheet not found: {stylesheet_path}"
            )

    return Theme(
        name=key,
        stylesheet=stylesheet_path.read_text(encoding="utf-8"),
        requested=requested,
    )
