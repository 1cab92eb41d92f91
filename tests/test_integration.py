"""Integration tests for the command line front end."""

from pathlib import Path
from unittest.mock import patch

import pytest

from main import StatementProcessor, main, parse_arguments
from statement_converter.exporters.csv_exporter import read_csv
from statement_converter.pdf_processor.extractor import ExtractedText, PDFCorruptedError


EXTRACTOR = "statement_converter.tasks.celery_app.TextExtractor"


class TestParseArguments:
    """Test cases for argument parsing."""

    def test_modes_are_exclusive(self):
        """Test that only one input mode is accepted."""
        with pytest.raises(SystemExit):
            parse_arguments(["--pdf-file", "a.pdf", "--text-file", "a.txt"])

    def test_mode_required(self):
        """Test that an input mode is required."""
        with pytest.raises(SystemExit):
            parse_arguments([])

    def test_options(self):
        """Test optional arguments."""
        args = parse_arguments(["--pdf-file", "a.pdf", "--header-style", "title", "--excel"])

        assert args.pdf_file == "a.pdf"
        assert args.header_style == "title"
        assert args.excel is True
        assert args.output_dir is None


class TestStatementProcessor:
    """Test cases for StatementProcessor."""

    def test_process_text_file(self, temp_dir, statement_text, sample_settings):
        """Test conversion of extracted text."""
        text_path = temp_dir / "august.txt"
        text_path.write_text(statement_text, encoding="utf-8")

        csv_path = StatementProcessor(sample_settings).process_text_file(str(text_path), str(temp_dir))

        rows = read_csv(Path(csv_path).read_text(encoding="utf-8"))
        assert csv_path.endswith("august_converted.csv")
        assert rows[1][:2] == ["Aug 19, 2025", "Direct Deposit"]

    def test_process_text_file_missing(self, temp_dir, sample_settings):
        """Test a missing text file."""
        assert StatementProcessor(sample_settings).process_text_file(str(temp_dir / "nope.txt")) is None

    @patch(EXTRACTOR)
    def test_process_pdf(self, mock_extractor, temp_dir, statement_text, sample_settings):
        """Test conversion of a PDF."""
        mock_extractor.return_value.extract_file.return_value = ExtractedText(statement_text, 1)
        pdf_path = temp_dir / "august.pdf"
        pdf_path.write_bytes(b"%PDF")

        csv_path = StatementProcessor(sample_settings).process_pdf(str(pdf_path), str(temp_dir))
        assert csv_path == str(temp_dir / "august_converted.csv")

    @patch(EXTRACTOR)
    def test_process_pdf_failure(self, mock_extractor, temp_dir, sample_settings):
        """Test a PDF that cannot be read."""
        mock_extractor.return_value.extract_file.side_effect = PDFCorruptedError("bad")
        pdf_path = temp_dir / "broken.pdf"
        pdf_path.write_bytes(b"junk")

        assert StatementProcessor(sample_settings).process_pdf(str(pdf_path), str(temp_dir)) is None

    @patch(EXTRACTOR)
    def test_process_batch(self, mock_extractor, temp_dir, statement_text, sample_settings):
        """Test batch conversion of a directory."""
        mock_extractor.return_value.extract_file.return_value = ExtractedText(statement_text, 1)
        batch_dir = temp_dir / "batch"
        batch_dir.mkdir()
        for name in ["a.pdf", "b.pdf"]:
            (batch_dir / name).write_bytes(b"%PDF")
        (batch_dir / "notes.txt").write_text("ignored")

        written = StatementProcessor(sample_settings).process_batch(str(batch_dir), str(temp_dir / "out"))

        assert [Path(p).name for p in written] == ["a_converted.csv", "b_converted.csv"]

    def test_process_batch_empty(self, temp_dir, sample_settings):
        """Test a directory without PDFs."""
        assert StatementProcessor(sample_settings).process_batch(str(temp_dir)) == []


class TestMain:
    """Test cases for the main entry point."""

    @pytest.fixture(autouse=True)
    def logs_in_temp_dir(self, temp_dir, monkeypatch):
        """Keep CLI log files out of the project tree."""
        monkeypatch.setenv("LOGS_DIR", str(temp_dir / "logs"))

    def test_text_file(self, temp_dir, statement_text, capsys):
        """Test a successful text conversion."""
        text_path = temp_dir / "august.txt"
        text_path.write_text(statement_text, encoding="utf-8")

        exit_code = main(["--text-file", str(text_path), "--output-dir", str(temp_dir), "--header-style", "title"])

        assert exit_code == 0
        assert "Success!" in capsys.readouterr().out
        content = (temp_dir / "august_converted.csv").read_text(encoding="utf-8")
        assert content.startswith('"Date","Type","Description","Amount","Balance"')

    def test_missing_pdf(self, temp_dir, capsys):
        """Test a failed PDF conversion."""
        exit_code = main(["--pdf-file", str(temp_dir / "missing.pdf"), "--output-dir", str(temp_dir)])

        assert exit_code == 1
        assert "Error" in capsys.readouterr().out

    def test_empty_batch(self, temp_dir):
        """Test a batch directory without PDFs."""
        assert main(["--batch-dir", str(temp_dir), "--output-dir", str(temp_dir)]) == 1

    def test_config_file(self, temp_dir, statement_text):
        """Test settings loaded from a JSON file."""
        text_path = temp_dir / "august.txt"
        text_path.write_text(statement_text, encoding="utf-8")
        config_path = temp_dir / "settings.json"
        config_path.write_text('{"header_style": "title", "max_transactions": 2}')

        exit_code = main(["--text-file", str(text_path), "--output-dir", str(temp_dir), "--config", str(config_path)])

        rows = read_csv((temp_dir / "august_converted.csv").read_text(encoding="utf-8"))
        assert exit_code == 0
        assert rows[0][0] == "Date"
        assert len(rows) == 3

    def test_invalid_settings(self, temp_dir, statement_text, monkeypatch, capsys):
        """Test that invalid settings stop the run before any output."""
        monkeypatch.setenv("WINDOW_LOOKAHEAD", "-1")
        text_path = temp_dir / "august.txt"
        text_path.write_text(statement_text, encoding="utf-8")

        exit_code = main(["--text-file", str(text_path), "--output-dir", str(temp_dir)])

        assert exit_code == 1
        assert "Invalid configuration" in capsys.readouterr().out
        assert not (temp_dir / "august_converted.csv").exists()
