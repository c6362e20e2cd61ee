"""Exception hierarchy for the Polis conversation exporter."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class PolisExportError(Exception):
    """Base exception for conversation export errors."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class SourceReadError(PolisExportError):
    """Raised when conversation data cannot be read from the database."""

    query: str

    def __str__(self) -> str:
        return f"Failed to read source: {self.query}\n{self.message}"


@dataclass
class OutputWriteError(PolisExportError):
    """Raised when an artifact cannot be written."""

    output_path: Path

    def __str__(self) -> str:
        return f"Failed to write output: {self.output_path}\n{self.message}"


@dataclass
class ValidationError(PolisExportError):
    """Raised when a written artifact does not match the reconciled data."""

    expected_count: int
    actual_count: int

    def __str__(self) -> str:
        return (
            f"Validation failed: {self.message}\n"
            f"Expected: {self.expected_count:,}\n"
            f"Actual: {self.actual_count:,}"
        )


@dataclass
class DuplicateKeyError(PolisExportError):
    """Raised when the crosswalk artifact repeats a participant id."""

    duplicate_count: int
    sample_duplicates: list[int] | None = None

    def __str__(self) -> str:
        msg = f"Found {self.duplicate_count:,} duplicate pid values in crosswalk"
        if self.sample_duplicates:
            samples = ", ".join(str(pid) for pid in self.sample_duplicates[:5])
            msg += f"\nExamples: {samples}"
        return msg
