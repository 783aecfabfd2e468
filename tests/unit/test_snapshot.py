"""
Unit tests for snapshot intake and proof generation.
"""

import json

import pytest

from ogclaim.core.generator import generate, write_outputs, ROOT_FILE, PROOFS_FILE
from ogclaim.core.merkle import EMPTY_ROOT, MerkleTree, OwnershipRecord, encode_leaf, verify_proof
from ogclaim.core.snapshot import Snapshot, load_snapshot


A = "0x" + "aa" * 20
B = "0x" + "bb" * 20
C = "0x" + "cc" * 20


def rec(token_id, owner):
    return OwnershipRecord.create(token_id, owner)


# =============================================================================
# Snapshot Tests
# =============================================================================


class TestSnapshot:
    """Tests for Snapshot."""

    def test_sorted_by_token_id(self):
        snapshot = Snapshot([rec(3, C), rec(1, A), rec(2, B)])
        assert [r.token_id for r in snapshot] == [1, 2, 3]

    def test_input_order_does_not_change_root(self):
        """Same records in any order commit to the same root."""
        first = Snapshot([rec(3, C), rec(1, A), rec(2, B)])
        second = Snapshot([rec(2, B), rec(3, C), rec(1, A)])
        assert MerkleTree.build(first.leaves()).root == MerkleTree.build(second.leaves()).root

    def test_duplicate_token_rejected(self):
        with pytest.raises(ValueError, match="Duplicate tokenId"):
            Snapshot([rec(1, A), rec(1, B)])

    def test_same_owner_many_tokens(self):
        snapshot = Snapshot([rec(1, A), rec(2, A), rec(3, B)])
        assert [r.token_id for r in snapshot.records_for_owner(A)] == [1, 2]

    def test_find(self):
        snapshot = Snapshot([rec(1, A)])
        assert snapshot.find(1).owner == bytes.fromhex("aa" * 20)
        assert snapshot.find(2) is None

    def test_from_entries(self):
        snapshot = Snapshot.from_entries([
            {"tokenId": 2, "owner": B},
            {"tokenId": 1, "owner": A},
        ])
        assert len(snapshot) == 2
        assert snapshot.leaves() == [encode_leaf(1, A), encode_leaf(2, B)]

    def test_from_entries_bad_owner(self):
        with pytest.raises(ValueError):
            Snapshot.from_entries([{"tokenId": 1, "owner": "0x1234"}])

    def test_load_snapshot(self, tmp_path):
        path = tmp_path / "zoraSnapshot.json"
        path.write_text(json.dumps([{"tokenId": 1, "owner": A}, {"tokenId": 2, "owner": B}]))
        snapshot = load_snapshot(path)
        assert [r.token_id for r in snapshot] == [1, 2]


# =============================================================================
# Generator Tests
# =============================================================================


class TestGenerator:
    """Tests for root and proof generation."""

    def test_generate_proofs_verify(self):
        snapshot = Snapshot([rec(1, A), rec(2, B), rec(3, C)])
        result = generate(snapshot)

        assert result.leaf_count == 3
        assert set(result.proofs) == {1, 2, 3}
        for token_id, bundle in result.proofs.items():
            assert bundle.root == result.root
            assert verify_proof(encode_leaf(token_id, bundle.owner), bundle.proof, result.root)

    def test_proof_for(self):
        result = generate(Snapshot([rec(1, A), rec(2, B)]))
        assert result.proof_for(2).token_id == 2
        assert result.proof_for(99) is None

    def test_empty_snapshot(self):
        result = generate(Snapshot([]))
        assert result.root == EMPTY_ROOT
        assert result.proofs == {}

    def test_write_outputs(self, tmp_path):
        result = generate(Snapshot([rec(1, A), rec(2, B), rec(3, C)]))
        root_path, proofs_path = write_outputs(result, tmp_path)

        assert root_path.name == ROOT_FILE
        assert proofs_path.name == PROOFS_FILE

        root_doc = json.loads(root_path.read_text())
        assert root_doc == {"merkleRoot": result.tree.hex_root, "encoding": "abi", "leafCount": 3}

        proofs_doc = json.loads(proofs_path.read_text())
        assert [entry["tokenId"] for entry in proofs_doc] == [1, 2, 3]
        assert proofs_doc[1]["proof"] == result.proof_for(2).hex_proof


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
