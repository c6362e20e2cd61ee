"""Validation suite for exported conversation artifacts.

Validates:
- Tier 1: Header, column types and row counts of votes and crosswalk
- Tier 2: Uniqueness of pid in the crosswalk
- Tier 3: Sampled crosswalk rows against the in-memory crosswalk

comments.csv is not read back: its text column is written without escaping
embedded quotes, so a CSV reader cannot parse it reliably.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pyarrow as pa

if TYPE_CHECKING:
    import duckdb

    from .crosswalk import Crosswalk

from .exceptions import DuplicateKeyError, ValidationError
from .exporter import QuoteStyle
from .schema import CROSSWALK_SCHEMA, VOTES_SCHEMA


def _escape_sql_path(path: Path) -> str:
    """Escape a path for use in SQL string literals (double single quotes)."""
    return str(path).replace("'", "''")


def _read_csv_sql(path: Path, schema: pa.Schema) -> str:
    """read_csv call with every column declared as VARCHAR."""
    columns = ", ".join(f"'{name}': 'VARCHAR'" for name in schema.names)
    return f"read_csv('{_escape_sql_path(path)}', header = true, columns = {{{columns}}})"


def read_artifact(path: Path, schema: pa.Schema, conn: duckdb.DuckDBPyConnection) -> pa.Table:
    """
    Read an artifact back and cast it to its declared schema.

    Raises:
        ValidationError: If the header does not match or a value does not
            cast to the declared type.
    """
    with path.open(encoding="utf-8") as f:
        header = f.readline().rstrip("\n")
    if header.split(",") != schema.names:
        raise ValidationError(
            message=f"Unexpected header in {path.name}: {header}",
            expected_count=len(schema.names),
            actual_count=len(header.split(",")),
        )

    table = conn.execute(f"SELECT * FROM {_read_csv_sql(path, schema)}").to_arrow_table()
    try:
        return table.cast(schema)
    except (ValueError, pa.ArrowNotImplementedError) as e:
        raise ValidationError(
            message=f"{path.name} does not match its schema: {e}",
            expected_count=table.num_rows,
            actual_count=0,
        ) from e


@dataclass
class ValidationResult:
    """Results from validation suite."""

    counts_valid: bool = False
    vote_count: int = 0
    crosswalk_count: int = 0

    uniqueness_valid: bool = False

    sample_valid: bool = False
    sample_size: int = 0

    @property
    def all_valid(self) -> bool:
        """Check if all validation tiers passed."""
        return self.counts_valid and self.uniqueness_valid and self.sample_valid


def validate_counts(
    votes_path: Path,
    crosswalk_path: Path,
    expected_votes: int,
    expected_crosswalk: int,
    conn: duckdb.DuckDBPyConnection,
) -> ValidationResult:
    """
    Tier 1: Verify the artifacts parse and hold the expected number of rows.

    Checks:
    - Headers match the artifact schemas
    - Every value casts to its column type
    - Row counts equal the reconciled counts
    """
    result = ValidationResult()

    votes = read_artifact(votes_path, VOTES_SCHEMA, conn)
    result.vote_count = votes.num_rows
    if votes.num_rows != expected_votes:
        raise ValidationError(
            message=f"Row count mismatch in {votes_path.name}",
            expected_count=expected_votes,
            actual_count=votes.num_rows,
        )

    crosswalk = read_artifact(crosswalk_path, CROSSWALK_SCHEMA, conn)
    result.crosswalk_count = crosswalk.num_rows
    if crosswalk.num_rows != expected_crosswalk:
        raise ValidationError(
            message=f"Row count mismatch in {crosswalk_path.name}",
            expected_count=expected_crosswalk,
            actual_count=crosswalk.num_rows,
        )

    result.counts_valid = True
    return result


def validate_uniqueness(
    crosswalk_path: Path,
    conn: duckdb.DuckDBPyConnection,
    result: ValidationResult,
) -> ValidationResult:
    """
    Tier 2: Verify each participant appears once in the crosswalk.
    """
    duplicates = conn.execute(f"""
        SELECT pid, COUNT(*) AS cnt
        FROM {_read_csv_sql(crosswalk_path, CROSSWALK_SCHEMA)}
        GROUP BY pid
        HAVING cnt > 1
        LIMIT 10
    """).fetchall()

    if duplicates:
        raise DuplicateKeyError(
            message="Found duplicate pid values in crosswalk",
            duplicate_count=len(duplicates),
            sample_duplicates=[int(r[0]) for r in duplicates],
        )

    result.uniqueness_valid = True
    return result


def validate_sample(
    crosswalk_path: Path,
    crosswalk: Crosswalk,
    conn: duckdb.DuckDBPyConnection,
    result: ValidationResult,
    sample_size: int = 100,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
) -> ValidationResult:
    """
    Tier 3: Sample verification against the in-memory crosswalk.

    For randomly sampled rows, verifies:
    - pid maps to the written uid
    - the written uid maps to the written xid
    - the composed pid -> xid agrees with both

    Under ``QuoteStyle.LEGACY`` an xid containing a double quote is written
    unescaped and cannot be read back verbatim, so only its pid -> uid hop
    is checked.
    """
    sample = conn.execute(f"""
        SELECT pid, uid, xid
        FROM {_read_csv_sql(crosswalk_path, CROSSWALK_SCHEMA)}
        USING SAMPLE {int(sample_size)} ROWS
    """).fetchall()

    result.sample_size = len(sample)

    for pid_text, uid_text, xid in sample:
        pid, uid = int(pid_text), int(uid_text)
        expected_xid = crosswalk.pid_to_xid.get(pid)
        xid_readable = quote_style is QuoteStyle.ESCAPED or '"' not in (expected_xid or "")
        if (
            crosswalk.pid_to_uid.get(pid) != uid
            or expected_xid is None
            or crosswalk.uid_to_xid.get(uid) != expected_xid
            or (xid_readable and expected_xid != xid)
        ):
            raise ValidationError(
                message=f"Mapping (pid={pid}, uid={uid}, xid={xid}) not found in crosswalk",
                expected_count=1,
                actual_count=0,
            )

    result.sample_valid = True
    return result
