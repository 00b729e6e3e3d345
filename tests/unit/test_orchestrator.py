"""Unit tests for orchestrator module - argument handling and run control.

Tests cover:
- Command-line argument parsing
- Combining CLI flags with configuration into BuildOptions
- Configuration file selection
- Exit codes for fatal errors, partial failures and clean runs

Real-world significance:
- Entry point for every build (``iridium -i docs -o site``)
- Flag precedence decides which files a build produces
- CI relies on the exit code to tell a broken build from a partial one
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from iridium import orchestrator
from iridium.config_loader import DEFAULT_CONFIG_PATH
from iridium.enums import RenderMode
from iridium.pdf_engine import PdfRenderError
from tests.fixtures.fake_engines import FakePdfEngine


class BrokenEngine(FakePdfEngine):
    def open(self) -> "BrokenEngine":
        raise PdfRenderError("failed to load WeasyPrint: no pango")


@pytest.mark.unit
class TestParseArgs:
    def test_required_arguments(self) -> None:
        args = orchestrator.parse_args(["-i", "docs", "-o", "site"])

        assert args.input_path == Path("docs")
        assert args.output_dir == Path("site")
        assert not args.pdf
        assert not args.pdf_mirror
        assert not args.no_watermark
        assert args.theme is None
        assert args.config_path is None
        assert args.report_path is None

    def test_long_flags(self) -> None:
        args = orchestrator.parse_args(
            [
                "--input", "docs",
                "--output", "site",
                "--no-water-mark",
                "--pdf",
                "--pdf-mirror",
                "--theme", "dark",
                "--config", "custom.yaml",
                "--report", "run.json",
            ]
        )

        assert args.no_watermark
        assert args.pdf
        assert args.pdf_mirror
        assert args.theme == "dark"
        assert args.config_path == Path("custom.yaml")
        assert args.report_path == Path("run.json")

    def test_missing_output_exits(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            orchestrator.parse_args(["-i", "docs"])

        assert exc_info.value.code == 2


@pytest.mark.unit
class TestBuildOptions:
    def _options(self, argv, config=None, tmp_path: Path = Path("/docs")):
        args = orchestrator.parse_args(["-i", "docs", "-o", "site", *argv])
        return orchestrator.build_options(args, config or {}, tmp_path)

    def test_defaults(self) -> None:
        options = self._options([])

        assert options.mode == RenderMode.HTML_ONLY
        assert options.watermark is True
        assert options.theme == "iridium"
        assert options.output_dir.is_absolute()

    def test_mirror_wins_over_pdf(self) -> None:
        """Verify --pdf --pdf-mirror together behave as mirror mode."""
        options = self._options(["--pdf", "--pdf-mirror"])

        assert options.mode == RenderMode.MIRROR

    def test_no_watermark_flag(self) -> None:
        assert self._options(["--no-water-mark"]).watermark is False

    def test_config_can_disable_watermark(self) -> None:
        options = self._options([], {"render": {"watermark": False}})

        assert options.watermark is False

    def test_cli_theme_overrides_config(self) -> None:
        config = {"render": {"theme": "paper"}}

        assert self._options([], config).theme == "paper"
        assert self._options(["-t", "dark"], config).theme == "dark"

    def test_config_sections_applied(self, default_config: Dict) -> None:
        default_config["markdown"]["extensions"] = ["tables"]
        default_config["pdf"].update({"orientation": "portrait", "margin_mm": 10, "validate": False})
        default_config["render"]["highlight_script"] = "https://cdn.example/hl.js"

        options = self._options(["--report", "r.json"], default_config)

        assert options.markdown_extensions == ("tables",)
        assert options.pdf.orientation == "portrait"
        assert options.pdf.margin_mm == 10
        assert options.validate_pdfs is False
        assert options.highlight_script == "https://cdn.example/hl.js"
        assert options.report_path == Path("r.json")


@pytest.mark.unit
class TestReadConfig:
    def test_explicit_missing_config_raises(self, tmp_test_dir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            orchestrator.read_config(tmp_test_dir / "nope.yaml")

    def test_default_config_used_when_not_given(self) -> None:
        assert DEFAULT_CONFIG_PATH.exists()
        assert orchestrator.read_config(None)["render"]["theme"] == "iridium"


@pytest.mark.unit
class TestMain:
    def test_missing_input_is_fatal(self, tmp_test_dir: Path, capsys: pytest.CaptureFixture) -> None:
        code = orchestrator.main(["-i", str(tmp_test_dir / "missing"), "-o", str(tmp_test_dir / "site")])

        assert code == orchestrator.EXIT_FATAL
        assert "Failed to canonicalize" in capsys.readouterr().err
        assert not (tmp_test_dir / "site").exists()

    def test_output_that_is_a_file_is_fatal(self, sample_site: Dict[str, Path], tmp_test_dir: Path) -> None:
        blocker = tmp_test_dir / "site-file"
        blocker.write_text("not a directory")

        code = orchestrator.main(["-i", str(sample_site["docs"]), "-o", str(blocker)])

        assert code == orchestrator.EXIT_FATAL

    def test_invalid_config_is_fatal(self, sample_site: Dict[str, Path], tmp_test_dir: Path) -> None:
        config = tmp_test_dir / "bad.yaml"
        config.write_text("pdf:\n  orientation: sideways\n")

        code = orchestrator.main(
            ["-i", str(sample_site["docs"]), "-o", str(sample_site["out"]), "-c", str(config)]
        )

        assert code == orchestrator.EXIT_FATAL

    def test_unknown_markdown_extension_is_fatal_before_writing(
        self, sample_site: Dict[str, Path], tmp_test_dir: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Verify an extension that cannot be imported stops the run untouched."""
        config = tmp_test_dir / "ext.yaml"
        config.write_text("markdown:\n  extensions: [no_such_ext]\n")

        code = orchestrator.main(
            ["-i", str(sample_site["docs"]), "-o", str(sample_site["out"]), "-c", str(config)]
        )

        assert code == orchestrator.EXIT_FATAL
        assert "markdown.extensions" in capsys.readouterr().err
        assert not sample_site["out"].exists()

    def test_html_build_succeeds(self, sample_site: Dict[str, Path], capsys: pytest.CaptureFixture) -> None:
        code = orchestrator.main(["-i", str(sample_site["docs"]), "-o", str(sample_site["out"])])

        out = capsys.readouterr().out
        assert code == orchestrator.EXIT_OK
        assert out.startswith("HTML Mode\n")
        assert f"Canonicalized {sample_site['docs']}" in out
        assert "Compilation complete in" in out

    def test_engine_open_failure_is_fatal(
        self, sample_site: Dict[str, Path], patch_engine
    ) -> None:
        """Verify nothing is compiled when the PDF engine cannot start."""
        patch_engine(BrokenEngine())

        code = orchestrator.main(["-i", str(sample_site["docs"]), "-o", str(sample_site["out"]), "--pdf"])

        assert code == orchestrator.EXIT_FATAL
        assert not list(sample_site["out"].rglob("*.pdf"))

    def test_failed_job_gives_partial_failure(
        self, sample_site: Dict[str, Path], patch_engine, capsys: pytest.CaptureFixture
    ) -> None:
        patch_engine(FakePdfEngine(fail_on=("setup",)))

        code = orchestrator.main(
            ["-i", str(sample_site["docs"]), "-o", str(sample_site["out"]), "--pdf-mirror"]
        )

        out = capsys.readouterr().out
        assert code == orchestrator.EXIT_PARTIAL_FAILURE
        assert "1 job(s) failed" in out
        assert (sample_site["out"] / "index.pdf").exists()
        assert not (sample_site["out"] / "guide" / "setup.html").exists()
