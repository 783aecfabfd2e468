"""
Unit tests for the sorted-pair Merkle tree.
"""

import pytest

from ogclaim.crypto import keccak256
from ogclaim.core.merkle import (
    EMPTY_ROOT,
    MerkleTree,
    encode_leaf,
    hash_pair,
    verify_proof,
)


def make_leaves(count):
    return [encode_leaf(i, bytes([i % 256]) * 20) for i in range(1, count + 1)]


class TestHashPair:
    """Tests for node hashing."""

    def test_order_independent(self):
        a, b = keccak256(b"a"), keccak256(b"b")
        assert hash_pair(a, b) == hash_pair(b, a)

    def test_smaller_first(self):
        a, b = keccak256(b"a"), keccak256(b"b")
        lo, hi = min(a, b), max(a, b)
        assert hash_pair(a, b) == keccak256(lo + hi)


class TestTreeConstruction:
    """Tests for MerkleTree.build."""

    def test_empty_tree(self):
        """No leaves gives the zero sentinel root."""
        tree = MerkleTree.build([])
        assert tree.root == EMPTY_ROOT
        assert tree.is_empty()
        assert len(tree) == 0
        assert tree.prove(keccak256(b"x")) is None

    def test_single_leaf(self):
        """A single leaf is its own root with an empty proof."""
        leaf = make_leaves(1)[0]
        tree = MerkleTree.build([leaf])
        assert tree.root == leaf
        assert tree.depth == 0
        assert tree.prove(leaf) == []
        assert verify_proof(leaf, [], tree.root)

    def test_two_leaves(self):
        l0, l1 = make_leaves(2)
        tree = MerkleTree.build([l0, l1])
        assert tree.root == hash_pair(l0, l1)
        assert tree.prove(l0) == [l1]
        assert tree.prove(l1) == [l0]

    def test_odd_node_promoted(self):
        """With 3 leaves the last leaf is carried up unchanged."""
        l0, l1, l2 = make_leaves(3)
        tree = MerkleTree.build([l0, l1, l2])

        assert [len(layer) for layer in tree.layers] == [3, 2, 1]
        assert tree.layers[1][1] == l2
        assert tree.root == hash_pair(hash_pair(l0, l1), l2)

    def test_odd_node_proofs(self):
        """The promoted node contributes no sibling at its carried layer."""
        l0, l1, l2 = make_leaves(3)
        tree = MerkleTree.build([l0, l1, l2])

        assert tree.prove_index(1) == [l0, l2]
        assert tree.prove_index(2) == [hash_pair(l0, l1)]

    def test_five_leaves_last_proof(self):
        leaves = make_leaves(5)
        tree = MerkleTree.build(leaves)
        assert [len(layer) for layer in tree.layers] == [5, 3, 2, 1]
        # Carried up twice, paired once at the top
        assert len(tree.prove_index(4)) == 1

    def test_deterministic(self):
        leaves = make_leaves(7)
        assert MerkleTree.build(leaves).layers == MerkleTree.build(leaves).layers

    def test_pair_swap_keeps_root(self):
        """Swapping two leaves of one pair does not change the root."""
        l0, l1, l2 = make_leaves(3)
        assert MerkleTree.build([l0, l1, l2]).root == MerkleTree.build([l1, l0, l2]).root

    def test_order_across_pairs_changes_root(self):
        """Leaf order fixes the tree shape, so it can change the root."""
        l0, l1, l2 = make_leaves(3)
        assert MerkleTree.build([l0, l1, l2]).root != MerkleTree.build([l2, l1, l0]).root

    def test_layers_immutable(self):
        tree = MerkleTree.build(make_leaves(4))
        assert isinstance(tree.layers, tuple)
        assert all(isinstance(layer, tuple) for layer in tree.layers)

    @pytest.mark.parametrize("bad", [b"\x00" * 31, b"\x00" * 33, 5, "0x" + "00" * 32])
    def test_invalid_leaf(self, bad):
        with pytest.raises(ValueError):
            MerkleTree.build(make_leaves(2) + [bad])

    def test_accepts_generator(self):
        leaves = make_leaves(4)
        assert MerkleTree.build(iter(leaves)).root == MerkleTree.build(leaves).root


class TestProofGeneration:
    """Tests for prove / prove_index."""

    def test_all_proofs_verify(self):
        """Every leaf of every tree size up to 17 proves against the root."""
        for count in range(1, 18):
            leaves = make_leaves(count)
            tree = MerkleTree.build(leaves)
            for leaf in leaves:
                proof = tree.prove(leaf)
                assert verify_proof(leaf, proof, tree.root), (count, leaf.hex())
                assert len(proof) <= tree.depth

    def test_missing_leaf(self):
        tree = MerkleTree.build(make_leaves(4))
        assert tree.prove(keccak256(b"not a leaf")) is None
        assert tree.hex_proof(keccak256(b"not a leaf")) is None

    def test_index_out_of_range(self):
        tree = MerkleTree.build(make_leaves(4))
        with pytest.raises(IndexError):
            tree.prove_index(4)
        with pytest.raises(IndexError):
            tree.prove_index(-1)

    def test_duplicate_leaf_first_wins(self):
        l0, l1 = make_leaves(2)
        tree = MerkleTree.build([l0, l1, l0])
        assert tree.index_of(l0) == 0
        assert verify_proof(l0, tree.prove(l0), tree.root)

    def test_hex_proof(self):
        leaves = make_leaves(4)
        tree = MerkleTree.build(leaves)
        hex_proof = tree.hex_proof(leaves[0])
        assert hex_proof == ["0x" + s.hex() for s in tree.prove(leaves[0])]
        assert tree.hex_root == "0x" + tree.root.hex()

    def test_contains(self):
        leaves = make_leaves(3)
        tree = MerkleTree.build(leaves)
        assert leaves[2] in tree
        assert keccak256(b"x") not in tree
        assert tree.get_leaf(1) == leaves[1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
