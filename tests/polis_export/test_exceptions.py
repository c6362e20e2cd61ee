"""Tests for the exporter exception hierarchy."""

from pathlib import Path

from scripts.polis_export.exceptions import (
    DuplicateKeyError,
    OutputWriteError,
    PolisExportError,
    SourceReadError,
    ValidationError,
)


class TestPolisExportError:
    """Tests for base PolisExportError exception."""

    def test_str_returns_message(self):
        error = PolisExportError(message="Test error message")
        assert str(error) == "Test error message"

    def test_is_exception_subclass(self):
        assert issubclass(PolisExportError, Exception)


class TestSourceReadError:
    """Tests for SourceReadError exception."""

    def test_str_includes_query(self):
        error = SourceReadError(message="Connection timeout", query="votes")
        result = str(error)
        assert result.startswith("Failed to read source: votes")
        assert "Connection timeout" in result

    def test_is_polis_export_error_subclass(self):
        assert issubclass(SourceReadError, PolisExportError)


class TestOutputWriteError:
    """Tests for OutputWriteError exception."""

    def test_str_includes_path(self):
        error = OutputWriteError(message="Permission denied", output_path=Path("/out/votes.csv"))
        result = str(error)
        assert "/out/votes.csv" in result
        assert "Permission denied" in result


class TestValidationError:
    """Tests for ValidationError exception."""

    def test_str_includes_counts(self):
        error = ValidationError(message="Row count mismatch", expected_count=1000, actual_count=999)
        result = str(error)
        assert "Row count mismatch" in result
        assert "1,000" in result
        assert "999" in result


class TestDuplicateKeyError:
    """Tests for DuplicateKeyError exception."""

    def test_str_includes_samples(self):
        error = DuplicateKeyError(message="dups", duplicate_count=2, sample_duplicates=[1, 7])
        result = str(error)
        assert "2 duplicate pid values" in result
        assert "1, 7" in result

    def test_str_without_samples(self):
        error = DuplicateKeyError(message="dups", duplicate_count=3)
        assert "Examples" not in str(error)
