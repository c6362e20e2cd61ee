"""Tests for snapshot records and analysis payload parsing."""

import dataclasses
import json

import pytest

from scripts.polis_export.exceptions import SourceReadError
from scripts.polis_export.records import AnalysisPayload, Cluster, Participant, SubgroupCluster

MATH_DATA = {
    "n": 3,
    "zid": 12,
    "tids": [5, 6],
    "in-conv": [0, 1, 2],
    "n-cmts": 2,
    "group-clusters": [
        {"id": 0, "center": [0.5, -0.25], "members": [10, 30]},
        {"id": 1, "center": [-0.5, 0.75], "members": [20]},
    ],
    "subgroup-clusters": {
        "0": [{"id": 0, "center": [0.1, 0.2], "members": [10], "parent-id": 0}],
    },
    "user-vote-counts": {"0": 2, "1": 1},
    "comment-priorities": {"5": 1.5},
    "group-aware-consensus": {"5": 0.25},
}


class TestRecords:
    """Tests for record immutability."""

    def test_records_are_frozen(self):
        participant = Participant(pid=1, uid=10, zid=12)

        with pytest.raises(dataclasses.FrozenInstanceError):
            participant.pid = 2


class TestAnalysisPayload:
    """Tests for AnalysisPayload.from_json."""

    def test_parses_group_clusters_in_order(self):
        payload = AnalysisPayload.from_json(MATH_DATA)

        assert payload.zid == 12
        assert payload.n == 3
        assert payload.group_clusters == (
            Cluster(id=0, members=(10, 30), center=(0.5, -0.25)),
            Cluster(id=1, members=(20,), center=(-0.5, 0.75)),
        )

    def test_parses_other_statistics(self):
        payload = AnalysisPayload.from_json(MATH_DATA)

        assert payload.tids == (5, 6)
        assert payload.in_conv == (0, 1, 2)
        assert payload.subgroup_clusters["0"] == (
            SubgroupCluster(id=0, members=(10,), center=(0.1, 0.2), parent_id=0),
        )
        assert payload.user_vote_counts == {"0": 2, "1": 1}
        assert payload.comment_priorities == {"5": 1.5}
        assert payload.group_aware_consensus == {"5": 0.25}

    def test_parses_moderation_and_pca(self):
        data = dict(
            MATH_DATA,
            **{
                "mod-in": [5],
                "mod-out": [6],
                "pca": {"center": [0.0, 0.0]},
                "group-votes": {"0": {"n-members": 2, "votes": {}}},
            },
        )

        payload = AnalysisPayload.from_json(data)

        assert payload.n_cmts == 2
        assert payload.mod_in == (5,)
        assert payload.mod_out == (6,)
        assert payload.pca == {"center": [0.0, 0.0]}
        assert payload.group_votes["0"]["n-members"] == 2

    def test_accepts_json_text(self):
        payload = AnalysisPayload.from_json(json.dumps(MATH_DATA))

        assert len(payload.group_clusters) == 2

    def test_explicit_zid_overrides_document(self):
        payload = AnalysisPayload.from_json({"group-clusters": []}, zid=7)

        assert payload.zid == 7

    def test_missing_keys_default_to_empty(self):
        payload = AnalysisPayload.from_json({"zid": 1})

        assert payload.group_clusters == ()
        assert payload.subgroup_clusters == {}

    def test_malformed_json_raises(self):
        with pytest.raises(SourceReadError) as exc_info:
            AnalysisPayload.from_json("{not json")

        assert "math_main" in str(exc_info.value)

    @pytest.mark.parametrize(
        "document",
        [
            "[]",
            '{"zid": 1, "n": "many"}',
            '{"zid": 1, "tids": null}',
            '{"zid": 1, "user-vote-counts": [1, 2]}',
            '{"zid": 1, "group-clusters": [{"members": [1]}]}',
        ],
    )
    def test_malformed_document_raises(self, document):
        """Every shape error surfaces as SourceReadError."""
        with pytest.raises(SourceReadError) as exc_info:
            AnalysisPayload.from_json(document, zid=1)

        assert "Malformed analysis payload" in str(exc_info.value)

    def test_non_object_without_zid_raises(self):
        with pytest.raises(SourceReadError):
            AnalysisPayload.from_json([])
