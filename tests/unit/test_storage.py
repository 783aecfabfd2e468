"""
Unit tests for distribution files and SQLite registry storage.
"""

import json

import pytest
from pydantic import ValidationError

from ogclaim.crypto import keccak256
from ogclaim.core.generator import generate
from ogclaim.core.merkle import OwnershipRecord
from ogclaim.core.snapshot import Snapshot
from ogclaim.core.storage import (
    ProofEntry,
    SnapshotEntry,
    StorageManager,
    find_proof,
    read_proofs_file,
    read_root_file,
    read_snapshot_file,
    write_proofs_file,
    write_root_file,
    write_snapshot_file,
)


A = "0x" + "aa" * 20
B = "0x" + "bb" * 20
ROOT = keccak256(b"root")


# =============================================================================
# File Tests
# =============================================================================


class TestSnapshotFile:
    """Tests for the snapshot file model."""

    def test_entry_checksums_owner(self):
        entry = SnapshotEntry.model_validate({"tokenId": 1, "owner": A})
        assert entry.owner != A  # EIP-55 mixed case
        assert entry.owner.lower() == A

    def test_numeric_string_token_id(self):
        entry = SnapshotEntry.model_validate({"tokenId": "12", "owner": A})
        assert entry.token_id == 12

    def test_negative_token_id(self):
        with pytest.raises(ValidationError):
            SnapshotEntry.model_validate({"tokenId": -1, "owner": A})

    @pytest.mark.parametrize("token_id", ["true", "false", "1.5", "1.0"])
    def test_non_integer_token_id(self, token_id):
        """JSON booleans and floats are not token IDs."""
        raw = '{"tokenId": %s, "owner": "%s"}' % (token_id, A)
        with pytest.raises(ValidationError):
            SnapshotEntry.model_validate_json(raw)
        with pytest.raises(ValidationError):
            ProofEntry.model_validate_json(raw[:-1] + ', "proof": []}')

    def test_bad_owner(self):
        with pytest.raises(ValidationError):
            SnapshotEntry.model_validate({"tokenId": 1, "owner": "0xnope"})

    def test_write_and_read(self, tmp_path):
        path = tmp_path / "snap.json"
        write_snapshot_file(path, [OwnershipRecord.create(2, B), OwnershipRecord.create(1, A)])
        entries = read_snapshot_file(path)
        assert [e.token_id for e in entries] == [2, 1]
        assert entries[0].to_record().owner == bytes.fromhex("bb" * 20)


class TestRootFile:
    """Tests for the root file and its encoding tag."""

    def test_write_and_read(self, tmp_path):
        path = tmp_path / "merkleRoot.json"
        write_root_file(path, ROOT, 3)
        root_file = read_root_file(path)
        assert root_file.root == ROOT
        assert root_file.encoding == "abi"
        assert root_file.leaf_count == 3

    def test_packed_tag_rejected(self, tmp_path):
        path = tmp_path / "merkleRoot.json"
        path.write_text(json.dumps({"merkleRoot": "0x" + ROOT.hex(), "encoding": "packed"}))
        with pytest.raises(ValueError, match="packed"):
            read_root_file(path)

    def test_untagged_file_accepted(self, tmp_path):
        """Files from before the tag existed load as abi."""
        path = tmp_path / "merkleRoot.json"
        path.write_text(json.dumps({"merkleRoot": "0x" + ROOT.hex()}))
        root_file = read_root_file(path)
        assert root_file.root == ROOT
        assert root_file.leaf_count is None

    def test_bad_root_hex(self, tmp_path):
        path = tmp_path / "merkleRoot.json"
        path.write_text(json.dumps({"merkleRoot": "0x1234", "encoding": "abi"}))
        with pytest.raises(ValueError):
            read_root_file(path)


class TestProofsFile:
    """Tests for the proof distribution file."""

    def test_round_trip_verifies(self, tmp_path):
        snapshot = Snapshot([OwnershipRecord.create(1, A), OwnershipRecord.create(2, B)])
        result = generate(snapshot)
        path = tmp_path / "merkleProofs.json"
        write_proofs_file(path, result.proofs.values())

        entry = find_proof(read_proofs_file(path), 2)
        bundle = entry.to_bundle(result.root)
        assert bundle == result.proof_for(2)
        assert bundle.verify()

    def test_find_missing(self, tmp_path):
        assert find_proof([], 1) is None

    def test_proof_hex_normalized(self):
        entry = ProofEntry.model_validate({"tokenId": 1, "owner": A, "proof": ["AB" * 32]})
        assert entry.proof == ["0x" + "ab" * 32]

    def test_short_proof_element_rejected(self):
        with pytest.raises(ValidationError):
            ProofEntry.model_validate({"tokenId": 1, "owner": A, "proof": ["0x" + "ab" * 31]})


# =============================================================================
# SQLite Tests
# =============================================================================


class TestStorageManager:
    """Tests for StorageManager / SQLiteAdapter."""

    def test_owner_meta(self, tmp_path):
        storage = StorageManager(tmp_path)
        assert storage.load_owner() is None
        storage.save_owner(b"\x01" * 20)
        assert storage.load_owner() == b"\x01" * 20

    def test_roots_ordered(self, tmp_path):
        storage = StorageManager(tmp_path)
        storage.persist_root(1, keccak256(b"1"), 100, 3)
        storage.persist_root(2, keccak256(b"2"), 200, 4)
        assert storage.load_roots() == [
            (1, keccak256(b"1"), 100, 3),
            (2, keccak256(b"2"), 200, 4),
        ]

    def test_claim_written_once(self, tmp_path):
        storage = StorageManager(tmp_path)
        assert storage.persist_claim(5, b"\xaa" * 20, 1, 100)
        assert not storage.persist_claim(5, b"\xbb" * 20, 2, 200)
        assert storage.get_claim(5) == (b"\xaa" * 20, 1, 100)
        assert storage.get_claims_count() == 1

    def test_uint256_token_id(self, tmp_path):
        """Token IDs beyond 64 bits survive storage."""
        storage = StorageManager(tmp_path)
        big = 2**255 + 7
        storage.persist_claim(big, b"\xaa" * 20, 1, 100)
        assert storage.load_claims() == [(big, b"\xaa" * 20, 1, 100)]
        assert storage.get_claim(big) is not None
        storage.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
