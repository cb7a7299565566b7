"""Tests for the command-line surface and exit statuses."""

from unittest.mock import patch

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from mermaid_pdf.cli import build_parser, main
from mermaid_pdf.pipeline import ConversionPipeline

from .fakes import FAKE_PDF, FakePlaywright


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in ("TEMP", "FORMAT", "MARGIN", "STYLE_PROFILE", "MARKDOWN_PROFILE", "TIMEOUT", "MERMAID_URL"):
        monkeypatch.delenv(f"MD2PDF_{key}", raising=False)


def _with_fake_browser(fake):
    def factory(logger, show_progress):
        return ConversionPipeline(logger=logger, playwright_factory=fake, show_progress=False)

    return patch("mermaid_pdf.cli.ConversionPipeline", side_effect=factory)


@pytest.fixture
def report(tmp_path):
    path = tmp_path / "report.md"
    path.write_text("# Report\n\n```mermaid\ngraph TD\n  A-->B\n```\n", encoding="utf-8")
    return path


class TestParser:
    def test_defaults_left_to_config(self):
        args = build_parser().parse_args(["--input", "a.md"])
        assert args.output is None
        assert args.temp is None
        assert args.format is None
        assert args.margin is None

    def test_short_flags(self):
        args = build_parser().parse_args(["-i", "a.md", "-o", "b.pdf", "-t", "x.html", "-f", "Letter", "-m", "2"])
        assert (args.input, args.output, args.temp, args.format, args.margin) == (
            "a.md", "b.pdf", "x.html", "Letter", "2"
        )

    def test_missing_input_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2
        assert "--input" in capsys.readouterr().err


class TestMain:
    def test_successful_conversion(self, report, tmp_path):
        fake = FakePlaywright(diagram_count=1)
        with _with_fake_browser(fake):
            status = main(["--input", str(report), "--temp", str(tmp_path / "temp.html"), "--no-progress"])

        assert status == 0
        assert (tmp_path / "report.pdf").read_bytes() == FAKE_PDF
        assert not (tmp_path / "temp.html").exists()

    def test_margin_applies_to_all_sides(self, report, tmp_path):
        fake = FakePlaywright()
        with _with_fake_browser(fake):
            main(["-i", str(report), "-t", str(tmp_path / "t.html"), "--margin", "2"])

        assert fake.page.pdf.call_args.kwargs["margin"] == {
            "top": "2cm", "right": "2cm", "bottom": "2cm", "left": "2cm"
        }
        assert fake.page.pdf.call_args.kwargs["format"] == "A4"

    def test_explicit_output(self, report, tmp_path):
        target = tmp_path / "out" / "final.pdf"
        with _with_fake_browser(FakePlaywright()):
            status = main(["-i", str(report), "-o", str(target), "-t", str(tmp_path / "t.html")])
        assert status == 0
        assert target.exists()

    def test_no_cleanup_keeps_temp(self, report, tmp_path):
        temp = tmp_path / "keep.html"
        with _with_fake_browser(FakePlaywright()):
            main(["-i", str(report), "-t", str(temp), "--no-cleanup"])
        assert '<div class="mermaid">' in temp.read_text(encoding="utf-8")

    def test_continuous_flag(self, report, tmp_path):
        fake = FakePlaywright(content_height=900)
        with _with_fake_browser(fake):
            main(["-i", str(report), "-t", str(tmp_path / "t.html"), "--continuous", "--page-width", "210mm"])
        kwargs = fake.page.pdf.call_args.kwargs
        assert (kwargs["width"], kwargs["height"]) == ("210mm", "900px")

    def test_missing_input_file(self, tmp_path, capsys):
        with _with_fake_browser(FakePlaywright()):
            status = main(["-i", str(tmp_path / "nope.md"), "-t", str(tmp_path / "t.html")])
        assert status == 1
        assert "Conversion failed" in capsys.readouterr().err

    def test_diagram_timeout_exit_status(self, report, tmp_path, capsys):
        fake = FakePlaywright(diagram_count=1)
        fake.page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout 1000ms exceeded.")
        with _with_fake_browser(fake):
            status = main(["-i", str(report), "-t", str(tmp_path / "t.html"), "--timeout", "1"])

        assert status == 1
        assert "did not render within 1s" in capsys.readouterr().err
        assert not (tmp_path / "report.pdf").exists()

    def test_invalid_margin(self, report, capsys):
        status = main(["-i", str(report), "--margin", "12in"])
        assert status == 2
        assert "Margin too large" in capsys.readouterr().err

    def test_invalid_format(self, report, capsys):
        status = main(["-i", str(report), "--format", "B9"])
        assert status == 2
        assert "Invalid page format" in capsys.readouterr().err

    def test_missing_dependencies(self, report):
        with patch("mermaid_pdf.cli.check_dependencies", return_value=False):
            assert main(["-i", str(report)]) == 1

    def test_unexpected_error_reported(self, report, tmp_path, capsys):
        fake = FakePlaywright()
        fake.page.pdf.side_effect = ValueError("boom")
        with _with_fake_browser(fake):
            status = main(["-i", str(report), "-t", str(tmp_path / "t.html")])
        assert status == 1
        assert "ValueError: boom" in capsys.readouterr().err
        assert not (tmp_path / "t.html").exists()

    def test_install_browsers(self):
        with patch("mermaid_pdf.cli.install_browsers", return_value=True) as install:
            assert main(["--install-browsers"]) == 0
        install.assert_called_once()

    def test_install_browsers_failure(self):
        with patch("mermaid_pdf.cli.install_browsers", return_value=False):
            assert main(["--install-browsers"]) == 1

    def test_temp_path_on_input_is_usage_error(self, report):
        original = report.read_text(encoding="utf-8")
        with _with_fake_browser(FakePlaywright()):
            status = main(["-i", str(report), "-t", str(report)])
        assert status == 2
        assert report.read_text(encoding="utf-8") == original
