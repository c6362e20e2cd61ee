"""Schema definitions for Polis conversation export."""

from typing import Final

import pyarrow as pa

# =============================================================================
# SOURCE CONFIGURATION
# =============================================================================

DEFAULT_DATABASE_URL = "postgresql://localhost/polis-dev"

# =============================================================================
# OUTPUT ARTIFACTS
# =============================================================================

VOTES_FILENAME: Final[str] = "votes.csv"
COMMENTS_FILENAME: Final[str] = "comments.csv"
CROSSWALK_FILENAME: Final[str] = "crosswalk.csv"
GROUPS_FILENAME: Final[str] = "groups.csv"

VOTES_SCHEMA = pa.schema(
    [
        # Statement id (tid)
        pa.field("comment_id", pa.int32(), nullable=False),
        # -1, 0 or 1, exported as stored
        pa.field("vote", pa.int16(), nullable=False),
        # External participant id (xid)
        pa.field("x_id", pa.string(), nullable=False),
    ]
)

COMMENTS_SCHEMA = pa.schema(
    [
        pa.field("comment_id", pa.int32(), nullable=False),
        pa.field("text", pa.string()),
    ]
)

CROSSWALK_SCHEMA = pa.schema(
    [
        pa.field("pid", pa.int32(), nullable=False),
        pa.field("uid", pa.int32(), nullable=False),
        pa.field("xid", pa.string(), nullable=False),
    ]
)

GROUPS_SCHEMA = pa.schema(
    [
        pa.field("x_id", pa.string(), nullable=False),
        pa.field("group_id", pa.int32(), nullable=False),
    ]
)

VOTES_COLUMNS: Final[list[str]] = VOTES_SCHEMA.names
COMMENTS_COLUMNS: Final[list[str]] = COMMENTS_SCHEMA.names
CROSSWALK_COLUMNS: Final[list[str]] = CROSSWALK_SCHEMA.names
GROUPS_COLUMNS: Final[list[str]] = GROUPS_SCHEMA.names

# Columns written as double-quoted text
TEXT_COLUMNS: Final[frozenset[str]] = frozenset({"text", "x_id", "xid"})

# =============================================================================
# RETRIEVAL SQL
# =============================================================================

# Users are read unscoped; the active-author view filters them later
USERS_QUERY = """
SELECT uid, username, email, site_owner
FROM users
"""

PARTICIPANTS_QUERY = """
SELECT pid, uid, zid
FROM participants
WHERE zid = %s
ORDER BY pid
"""

# External ids are global, not conversation scoped
XIDS_QUERY = """
SELECT uid, xid
FROM xids
"""

VOTES_QUERY = """
SELECT pid, zid, tid, vote, high_priority
FROM votes
WHERE zid = %s
"""

COMMENTS_QUERY = """
SELECT tid, pid, zid, uid, txt AS text, lang, anon
FROM comments
WHERE zid = %s
ORDER BY tid
"""

MATH_QUERY = """
SELECT zid, data
FROM math_main
WHERE zid = %s
"""
