"""Configuration loading utilities for the Iridium build pipeline.

Provides a centralized way to load and validate the parameters.yaml
configuration file. CLI flags override the values loaded here.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import markdown
import yaml

SCRIPT_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = SCRIPT_DIR.parent / "config" / "parameters.yaml"

VALID_ORIENTATIONS = {"landscape", "portrait"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load and parse the parameters.yaml configuration file.

    Automatically validates the configuration after loading. Raises
    clear exceptions if validation fails, enabling fail-fast behavior
    for infrastructure errors.

    Parameters
    ----------
    config_path : Path, optional
        Path to the configuration file. If not provided, uses the default
        location (config/parameters.yaml in the project root).

    Returns
    -------
    Dict[str, Any]
        Parsed and validated YAML configuration as a nested dictionary.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the configuration file is invalid YAML.
    ValueError
        If the configuration fails validation (see validate_config).
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """Validate the entire configuration for consistency and required values.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary (result of load_config).

    Raises
    ------
    ValueError
        If a configured value has the wrong type or is out of range.

    Notes
    -----
    **Validation checks:**

    - **Render:** theme and highlight_script must be strings, watermark a boolean
    - **Markdown:** extensions must be a list of strings naming importable
      Python-Markdown extensions
    - **PDF:** orientation must be landscape/portrait, margin_mm non-negative,
      page_size a string, validate a boolean
    - **Logging:** level must be a standard logging level name

    Every key is optional; missing keys fall back to the BuildOptions defaults.
    """
    render_config = config.get("render", {}) or {}
    for key in ("theme", "highlight_script"):
        value = render_config.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(
                f"render.{key} must be a string, got {type(value).__name__}"
            )

    watermark = render_config.get("watermark", True)
    if not isinstance(watermark, bool):
        raise ValueError(
            f"render.watermark must be a boolean, got {type(watermark).__name__}"
        )

    markdown_config = config.get("markdown", {}) or {}
    extensions = markdown_config.get("extensions", [])
    if not isinstance(extensions, list) or not all(
        isinstance(ext, str) for ext in extensions
    ):
        raise ValueError("markdown.extensions must be a list of extension names")

    try:
        markdown.Markdown(extensions=extensions)
    except (ImportError, AttributeError, TypeError) as exc:
        raise ValueError(
            f"markdown.extensions contains an unusable extension: {exc}"
        ) from exc

    pdf_config = config.get("pdf", {}) or {}
    orientation = pdf_config.get("orientation", "landscape")
    if orientation not in VALID_ORIENTATIONS:
        raise ValueError(
            f"pdf.orientation must be one of {sorted(VALID_ORIENTATIONS)}, "
            f"got {orientation!r}"
        )

    margin = pdf_config.get("margin_mm", 0)
    if isinstance(margin, bool) or not isinstance(margin, (int, float)):
        raise ValueError(
            f"pdf.margin_mm must be a number, got {type(margin).__name__}"
        )
    if margin < 0:
        raise ValueError(f"pdf.margin_mm must not be negative, got {margin}")

    page_size = pdf_config.get("page_size", "A4")
    if not isinstance(page_size, str):
        raise ValueError(
            f"pdf.page_size must be a string, got {type(page_size).__name__}"
        )

    validate = pdf_config.get("validate", True)
    if not isinstance(validate, bool):
        raise ValueError(
            f"pdf.validate must be a boolean, got {type(validate).__name__}"
        )

    logging_config = config.get("logging", {}) or {}
    level = logging_config.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {sorted(VALID_LOG_LEVELS)}, got {level!r}"
        )


def log_level(config: Dict[str, Any]) -> int:
    """Return the numeric logging level configured under logging.level."""
    level = (config.get("logging", {}) or {}).get("level", "INFO")
    return getattr(logging, level.upper())
