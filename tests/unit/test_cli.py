#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli.py
"""Unit tests for the command-line interface."""

import io
import json
from pathlib import Path

import pytest

from richnote.cli import EXIT_ERROR, EXIT_FILE_ERROR, EXIT_SUCCESS, EXIT_USAGE_ERROR, main
from richnote.exceptions import ValidationError


@pytest.mark.unit
class TestConvert:
    """Tests for the convert subcommand."""

    def test_html_to_markdown(self, note_file: Path, capsys) -> None:
        """Test converting an HTML note to Markdown on standard output."""
        assert main(["convert", str(note_file), "--from", "html", "--to", "markdown"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "# Plan\n\nStep **one**\n"

    def test_html_to_plain(self, note_file: Path, capsys) -> None:
        """Test the plain text target."""
        assert main(["convert", str(note_file), "--to", "plain"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Plan\nStep one\n"

    def test_markdown_to_html_file(self, tmp_path: Path) -> None:
        """Test writing output to a file with -o."""
        source = tmp_path / "todo.md"
        source.write_text("# Todo\n\nStep **one**\n", encoding="utf-8")
        target = tmp_path / "todo.html"
        result = main(["convert", str(source), "--from", "markdown", "--to", "html", "-o", str(target)])
        assert result == EXIT_SUCCESS
        assert target.read_text(encoding="utf-8") == "<h1>Todo</h1><p>Step <strong>one</strong></p>"

    def test_text_source(self, tmp_path: Path, capsys) -> None:
        """Test that text input becomes one paragraph per line."""
        source = tmp_path / "lines.txt"
        source.write_text("a\nb", encoding="utf-8")
        assert main(["convert", str(source), "--from", "text", "--to", "html"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<p>a</p><p>b</p>\n"

    def test_raw_keeps_unsanitized_structure(self, tmp_path: Path, capsys) -> None:
        """Test that --raw skips the sanitizer."""
        source = tmp_path / "raw.html"
        source.write_text("<p>keep</p><script>x()</script>", encoding="utf-8")
        assert main(["convert", str(source), "--raw", "--to", "plain"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "keep\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test the exit code for unreadable input."""
        assert main(["convert", str(tmp_path / "missing.html")]) == EXIT_FILE_ERROR

    def test_invalid_choice(self, note_file: Path) -> None:
        """Test that bad arguments are usage errors."""
        assert main(["convert", str(note_file), "--to", "pdf"]) == EXIT_USAGE_ERROR

    def test_missing_command(self) -> None:
        """Test that a subcommand is required."""
        assert main([]) == EXIT_USAGE_ERROR


@pytest.mark.unit
class TestSanitizeAndExport:
    """Tests for the sanitize and export subcommands."""

    def test_sanitize_prints_json(self, note_file: Path, capsys) -> None:
        """Test the sanitized record printed as JSON."""
        assert main(["sanitize", str(note_file)]) == EXIT_SUCCESS
        record = json.loads(capsys.readouterr().out)
        assert record["title"] == "Plan"
        assert record["mimeType"] == "text/html"
        assert record["content"] == "<h1>Plan</h1><p>Step <strong>one</strong></p>"

    def test_sanitize_keeps_title(self, note_file: Path, capsys) -> None:
        """Test the --title option."""
        assert main(["sanitize", str(note_file), "--title", "Mine"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["title"] == "Mine"

    def test_export_from_stdin(self, monkeypatch, capsys) -> None:
        """Test reading a Markdown note from standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("Shopping\nmilk"))
        assert main(["export", "-", "--mime-type", "text/markdown"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Shopping.md\n"

    def test_library_errors_exit_with_error_code(self, note_file: Path, monkeypatch) -> None:
        """Test that richnote errors map to the general error code."""

        def fail(raw):
            raise ValidationError("bad note")

        monkeypatch.setattr("richnote.cli.sanitize_note", fail)
        assert main(["sanitize", str(note_file)]) == EXIT_ERROR

    def test_export_name(self, note_file: Path, capsys) -> None:
        """Test the export file name."""
        assert main(["export", str(note_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Plan.html\n"

    def test_version(self, capsys) -> None:
        """Test that --version exits cleanly."""
        assert main(["--version"]) == EXIT_SUCCESS
        assert "richnote" in capsys.readouterr().out
