"""Tests for the conversation export pipeline."""

import dataclasses
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from scripts.polis_export.exceptions import OutputWriteError
from scripts.polis_export.exporter import QuoteStyle
from scripts.polis_export.extractor import export_conversation, run_export
from scripts.polis_export.records import ConversationSnapshot, ExternalIdentity, Statement, Vote


class TestExportConversation:
    """Tests for export_conversation."""

    def test_writes_all_artifacts(self, tmp_path: Path, snapshot):
        result = export_conversation(snapshot, tmp_path)

        assert result.votes_path.read_text(encoding="utf-8") == 'comment_id,vote,x_id\n5,1,"ext-a"\n'
        assert result.comments_path.read_text(encoding="utf-8") == (
            'comment_id,text\n5,"More bike lanes"\n6,"Fewer cars downtown"\n'
        )
        assert result.crosswalk_path.read_text(encoding="utf-8") == 'pid,uid,xid\n1,10,"ext-a"\n'
        assert result.groups_path.read_text(encoding="utf-8") == 'x_id,group_id\n"ext-a",0\n'

    def test_reports_counts(self, tmp_path: Path, snapshot):
        result = export_conversation(snapshot, tmp_path)

        assert result.participant_count == 2
        assert result.crosswalk_count == 1
        assert result.vote_count == 2
        assert result.votes_written == 1
        assert result.votes_dropped == 1
        assert result.comment_count == 2
        assert result.active_author_count == 2
        assert result.group_member_count == 1
        assert result.group_members_unresolved == 1
        assert result.validation.all_valid

    def test_skips_validation_when_disabled(self, tmp_path: Path, snapshot):
        result = export_conversation(snapshot, tmp_path, validate=False)

        assert not result.validation.counts_valid
        assert not result.validation.all_valid

    def test_skips_groups_when_disabled(self, tmp_path: Path, snapshot):
        result = export_conversation(snapshot, tmp_path, include_groups=False)

        assert result.groups_path is None
        assert not (tmp_path / "groups.csv").exists()

    def test_empty_conversation(self, tmp_path: Path):
        """No participants: votes are all dropped and nothing raises."""
        snapshot = ConversationSnapshot(
            zid=1,
            votes=(Vote(pid=1, zid=1, tid=1, vote=1),),
        )

        result = export_conversation(snapshot, tmp_path)

        assert result.votes_written == 0
        assert result.votes_dropped == 1
        assert result.votes_path.read_text(encoding="utf-8") == "comment_id,vote,x_id\n"
        assert result.groups_path.read_text(encoding="utf-8") == "x_id,group_id\n"
        assert result.validation.all_valid

    def test_quote_style_applies_to_comments(self, tmp_path: Path):
        snapshot = ConversationSnapshot(
            zid=1,
            statements=(Statement(tid=1, pid=1, zid=1, uid=10, text='say "yes"'),),
        )

        legacy = export_conversation(snapshot, tmp_path / "legacy", validate=False)
        escaped = export_conversation(
            snapshot, tmp_path / "escaped", quote_style=QuoteStyle.ESCAPED, validate=False
        )

        assert legacy.comments_path.read_text(encoding="utf-8").splitlines()[1] == '1,"say "yes""'
        assert escaped.comments_path.read_text(encoding="utf-8").splitlines()[1] == '1,"say ""yes"""'

    def test_validates_external_id_containing_quote(self, tmp_path: Path, snapshot):
        """An xid with an embedded quote is written unescaped and still validates."""
        snapshot = dataclasses.replace(
            snapshot,
            identities=(ExternalIdentity(uid=10, xid='ab"c'),),
        )

        result = export_conversation(snapshot, tmp_path, include_groups=False)

        assert result.crosswalk_path.read_text(encoding="utf-8") == 'pid,uid,xid\n1,10,"ab"c"\n'
        assert result.validation.all_valid

    def test_validates_escaped_external_id_containing_quote(self, tmp_path: Path, snapshot):
        snapshot = dataclasses.replace(
            snapshot,
            identities=(ExternalIdentity(uid=10, xid='ab"c'),),
        )

        result = export_conversation(
            snapshot, tmp_path, include_groups=False, quote_style=QuoteStyle.ESCAPED
        )

        assert result.crosswalk_path.read_text(encoding="utf-8") == 'pid,uid,xid\n1,10,"ab""c"\n'
        assert result.validation.all_valid

    def test_write_failure_keeps_earlier_artifacts(self, tmp_path: Path, snapshot):
        """A failed comments write leaves votes.csv in place and stops the run."""
        (tmp_path / "comments.csv").mkdir()

        with pytest.raises(OutputWriteError):
            export_conversation(snapshot, tmp_path)

        assert (tmp_path / "votes.csv").exists()
        assert not (tmp_path / "crosswalk.csv").exists()


class TestRunExport:
    """Tests for run_export."""

    def test_fetches_snapshot_then_exports(self, tmp_path: Path, snapshot):
        source = MagicMock()
        source.__enter__.return_value = source
        source.fetch_snapshot.return_value = snapshot

        with patch(
            "scripts.polis_export.extractor.PolisSource.connect",
            return_value=source,
        ) as mock_connect:
            result = run_export("postgresql://localhost/test", 12, tmp_path, validate=False)

        mock_connect.assert_called_once_with("postgresql://localhost/test")
        source.fetch_snapshot.assert_called_once_with(12)
        assert result.zid == 12
        assert result.votes_written == 1
