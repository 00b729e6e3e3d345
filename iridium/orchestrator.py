"""Iridium build orchestrator.

Turns a Markdown file or directory tree into a themed static site, optionally
rendering each page as a PDF as well (``--pdf-mirror``) or instead
(``--pdf``). Steps run in sequence:

1. Resolve the input path and build the run options
2. Discover files and compute every destination
3. Copy non-Markdown assets
4. Render, relink and write each Markdown document
5. Validate produced PDFs and write the run report (optional)

**Error Handling Philosophy:**

- **Infrastructure Errors** (unresolvable input, invalid config, PDF engine
  unavailable) fail fast with exit code 1 before any job runs.
- **Per-job Errors** (unreadable source, failed write, PDF build failure) are
  logged with the job's source path and skipped; remaining jobs continue and
  the failure count is reported at the end.

**Exit Codes:**
- 0: Build completed and every job succeeded
- 1: Build could not start (input, config or PDF engine error)
- 2: Build completed but at least one job failed
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import __version__
from .asset_migrator import migrate_assets
from .config_loader import DEFAULT_CONFIG_PATH, load_config, log_level
from .data_models import BuildOptions, JobResult, PdfOptions, RenderJob, RunSummary
from .document_renderer import display_title, render_document
from .enums import RenderMode, RenderTarget
from .link_rewriter import relink
from .output_writer import write_outputs
from .pdf_engine import PdfEngine, PdfRenderError
from .themes import DEFAULT_THEME, Theme, load_theme
from .tree_walker import InputResolutionError, resolve_input, walk
from .validate_outputs import validate_pdfs, write_report

LOG = logging.getLogger(__name__)
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="iridium",
        description="A static site generator for Markdown document trees.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -i docs/ -o site/
  %(prog)s -i docs/ -o site/ --pdf-mirror --theme dark
  %(prog)s -i README.md -o out/ --pdf --no-water-mark
        """,
    )
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        dest="input_path",
        metavar="PATH",
        help="Location to read from (a file or a directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        dest="output_dir",
        metavar="PATH",
        help="Location to write to (must be a directory)",
    )
    parser.add_argument(
        "--no-water-mark",
        action="store_true",
        dest="no_watermark",
        help="Remove the watermark",
    )
    parser.add_argument(
        "--pdf",
        action="store_true",
        help="Render the output as PDF instead of HTML",
    )
    parser.add_argument(
        "--pdf-mirror",
        action="store_true",
        dest="pdf_mirror",
        help="Render the output as PDF as well as HTML",
    )
    parser.add_argument(
        "-t",
        "--theme",
        type=str,
        default=None,
        help=f"Theme to use for rendering (default: '{DEFAULT_THEME}')",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        dest="config_path",
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        dest="report_path",
        metavar="PATH",
        help="Write a JSON run report to PATH",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def read_config(config_path: Optional[Path]) -> Dict[str, Any]:
    """Load the configuration file.

    An explicitly given path must exist. When no path is given the default
    ``config/parameters.yaml`` is used if present, otherwise built-in defaults.
    """
    if config_path is not None:
        return load_config(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return {}


def configure_logging(level: int = logging.INFO) -> None:
    """Send pipeline diagnostics to stderr at the configured level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def build_options(
    args: argparse.Namespace,
    config: Dict[str, Any],
    input_path: Path,
) -> BuildOptions:
    """Combine CLI flags and configuration into the run's BuildOptions.

    CLI flags take precedence over configuration values. ``input_path`` must
    already be canonicalized.
    """
    render_config = config.get("render", {}) or {}
    markdown_config = config.get("markdown", {}) or {}
    pdf_config = config.get("pdf", {}) or {}
    defaults = BuildOptions(input_path=input_path, output_dir=args.output_dir)

    extensions = markdown_config.get("extensions")
    return BuildOptions(
        input_path=input_path,
        output_dir=args.output_dir.resolve(),
        mode=RenderMode.from_flags(pdf=args.pdf, pdf_mirror=args.pdf_mirror),
        watermark=render_config.get("watermark", True) and not args.no_watermark,
        theme=args.theme or render_config.get("theme") or DEFAULT_THEME,
        markdown_extensions=(
            tuple(extensions) if extensions is not None else defaults.markdown_extensions
        ),
        highlight_script=render_config.get("highlight_script") or defaults.highlight_script,
        pdf=PdfOptions(
            page_size=pdf_config.get("page_size", "A4"),
            orientation=pdf_config.get("orientation", "landscape"),
            margin_mm=pdf_config.get("margin_mm", 0),
        ),
        validate_pdfs=pdf_config.get("validate", True),
        report_path=args.report_path,
    )


def print_header(options: BuildOptions) -> None:
    """Print the run header."""
    print(options.mode.label)
    print(f"Canonicalized {options.input_path}")


def compile_document(
    job: RenderJob,
    theme: Theme,
    options: BuildOptions,
    engine: Optional[PdfEngine],
    written: Optional[List[Path]] = None,
) -> List[Path]:
    """Render one Markdown source and write its outputs.

    The page is rendered once; the html and pdf variants are independent
    relinked copies of it. Files are appended to ``written`` as they land.
    """
    text = job.source.read_text(encoding="utf-8")
    document = render_document(
        text,
        display_title(job.source),
        stylesheet=theme.stylesheet,
        watermark=options.watermark,
        extensions=options.markdown_extensions,
        highlight_script=options.highlight_script,
    )
    html = relink(document.html, RenderTarget.HTML)
    pdf_html = relink(document.html, RenderTarget.PDF) if options.mode.needs_pdf else None
    return write_outputs(
        job.destination,
        html,
        pdf_html,
        document.title,
        options.mode,
        engine,
        written,
    )


def process_job(
    job: RenderJob,
    theme: Theme,
    options: BuildOptions,
    engine: Optional[PdfEngine],
) -> JobResult:
    """Run one job, converting expected failures into a failed JobResult.

    A failed job keeps the outputs written before the failure (in mirror mode,
    the PDF when the HTML write fails) so they are still reported and
    validated.
    """
    written: List[Path] = []
    try:
        compile_document(job, theme, options, engine, written)
    except (OSError, UnicodeDecodeError, PdfRenderError) as exc:
        LOG.error("Failed to compile %s: %s", job.source, exc)
        print(f"❌ Failed: {job.source} ({exc})")
        return JobResult(job=job, outputs=written, error=str(exc))
    return JobResult(job=job, outputs=written)


def run_pipeline(options: BuildOptions) -> RunSummary:
    """Build every document under ``options.input_path``.

    Parameters
    ----------
    options : BuildOptions
        Run configuration with a canonicalized input path.

    Returns
    -------
    RunSummary
        Discovery, migration and compilation counts plus per-job results.

    Raises
    ------
    PdfRenderError
        If PDF output is requested and the engine cannot be opened.
    """
    theme = load_theme(options.theme)
    if theme.is_fallback:
        print(f"Unknown theme '{theme.requested}', using '{theme.name}'")

    is_directory = options.input_path.is_dir()
    if is_directory:
        print("Discovering Files...")
    _, jobs = walk(options.input_path, options.output_dir)
    if is_directory:
        print(f"Discovered {len(jobs)} Files")
        print("Migrating incompatible files...")

    migration = migrate_assets(jobs)
    results: List[JobResult] = [
        JobResult(job=job, outputs=[], error=reason) for job, reason in migration.failures
    ]

    engine_context = (
        PdfEngine(options.pdf) if options.mode.needs_pdf else contextlib.nullcontext()
    )
    with engine_context as engine:
        for job in migration.render_jobs:
            results.append(process_job(job, theme, options, engine))

    compiled = sum(len(result.outputs) for result in results)
    succeeded = sum(
        1 for result in results if result.succeeded and result.outputs
    )
    summary = RunSummary(
        discovered=len(jobs),
        migrated=len(migration.copied) + succeeded,
        compiled=compiled,
        results=results,
    )
    if is_directory:
        print(f"Migrated {summary.migrated} Files")
        print(f"Compiled {summary.compiled} Files")
    return summary


def print_summary(summary: RunSummary, total_duration: float) -> None:
    """Print the completion message and any failed jobs."""
    if summary.failed:
        print(f"⚠️  {summary.failed} job(s) failed:")
        for result in summary.results:
            if not result.succeeded:
                print(f"  - {result.job.source}: {result.error}")
    print(f"Compilation complete in {total_duration:.1f}s.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the build and return the process exit code."""
    args = parse_args(argv)

    try:
        config = read_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    configure_logging(log_level(config))

    try:
        input_path = resolve_input(args.input_path)
    except InputResolutionError as exc:
        print(f"An error occurred: {exc}", file=sys.stderr)
        return EXIT_FATAL

    if args.output_dir.exists() and not args.output_dir.is_dir():
        print(f"Error: output path is not a directory: {args.output_dir}", file=sys.stderr)
        return EXIT_FATAL

    options = build_options(args, config, input_path)
    print_header(options)

    total_start = time.time()
    try:
        summary = run_pipeline(options)
    except PdfRenderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    pdf_checks = []
    if options.mode.needs_pdf and options.validate_pdfs:
        written = [path for result in summary.results for path in result.outputs]
        pdf_checks = validate_pdfs(written)

    if options.report_path is not None:
        report = write_report(summary, options.mode, options.report_path, pdf_checks)
        print(f"Run report written to {report}")

    print_summary(summary, time.time() - total_start)
    return EXIT_PARTIAL_FAILURE if summary.failed else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
