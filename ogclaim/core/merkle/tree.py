"""
Sorted-pair Merkle Tree for ownership snapshots.

Conceptual Background:
---------------------
The tree commits to the whole snapshot with one 32-byte root, and lets any
owner prove their own leaf with a short list of sibling hashes.

Node hashing sorts the two children before concatenating:

    parent = keccak256(min(a, b) || max(a, b))

so a proof needs no left/right flags. This is the rule used by
OpenZeppelin's MerkleProof library and merkletreejs with sortPairs.

Odd layers promote their last node unchanged to the next layer. It is not
duplicated and not hashed with itself, so that node contributes no sibling
to proofs at that layer.

Leaf order is preserved exactly as given: it fixes the tree shape, and
therefore the root. Callers that want reproducible roots must supply leaves
in a reproducible order (Snapshot sorts by tokenId).

Properties:
----------
- Build: O(n) hashes, all layers retained
- Root: O(1)
- Prove: O(n) leaf lookup + O(log n) walk
- Verify: O(log n), see ogclaim.core.merkle.proof
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ogclaim.crypto import keccak256, bytes_to_hex
from ogclaim.utils.logger import get_logger
from ogclaim.utils.validation import require, validate_hash

logger = get_logger("merkle")


# =============================================================================
# Constants
# =============================================================================

# Root of a tree with no leaves. Never published.
EMPTY_ROOT = bytes(32)


# =============================================================================
# Node Hashing
# =============================================================================


def hash_pair(a: bytes, b: bytes) -> bytes:
    """Hash two nodes together, smaller one first."""
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def next_layer(layer: List[bytes]) -> List[bytes]:
    """
    Derive the parent layer.

    Adjacent nodes are paired; an odd trailing node is carried up as is.
    """
    parents = []
    for i in range(0, len(layer) - 1, 2):
        parents.append(hash_pair(layer[i], layer[i + 1]))
    if len(layer) % 2 == 1:
        parents.append(layer[-1])
    return parents


# =============================================================================
# Merkle Tree
# =============================================================================


class MerkleTree:
    """
    Immutable binary Merkle tree over a fixed leaf sequence.

    Use MerkleTree.build(leaves). Every layer is kept so proofs never
    recompute hashes.

    Attributes:
        layers: layers[0] is the leaves, layers[-1] is (root,)
    """

    EMPTY_ROOT = EMPTY_ROOT

    def __init__(self, layers: Tuple[Tuple[bytes, ...], ...]):
        self._layers = layers
        # First occurrence wins for duplicate leaves, as in merkletreejs
        self._index: Dict[bytes, int] = {}
        for i, leaf in enumerate(layers[0]):
            self._index.setdefault(leaf, i)

    @classmethod
    def build(cls, leaves: Iterable[bytes]) -> "MerkleTree":
        """
        Build a tree from an ordered sequence of 32-byte leaves.

        Args:
            leaves: Leaf hashes, in commitment order

        Returns:
            The built tree

        Raises:
            ValueError: if any leaf is not 32 bytes
        """
        layer = list(leaves)
        for i, leaf in enumerate(layer):
            require(validate_hash(leaf, f"leaf[{i}]"))
        layer = [bytes(leaf) for leaf in layer]

        if not layer:
            logger.warning("Building Merkle tree with no leaves; root is the empty sentinel")
            return cls(((),))

        layers = [tuple(layer)]
        while len(layer) > 1:
            layer = next_layer(layer)
            layers.append(tuple(layer))

        tree = cls(tuple(layers))
        logger.info(f"Built Merkle tree: leaves={len(tree)}, depth={tree.depth}, root={tree.hex_root}")
        return tree

    # =========================================================================
    # Structure
    # =========================================================================

    @property
    def layers(self) -> Tuple[Tuple[bytes, ...], ...]:
        return self._layers

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        return self._layers[0]

    @property
    def root(self) -> bytes:
        """
        Get the Merkle root.

        Returns:
            32-byte root hash, EMPTY_ROOT for an empty tree
        """
        if not self.leaves:
            return EMPTY_ROOT
        return self._layers[-1][0]

    @property
    def hex_root(self) -> str:
        return bytes_to_hex(self.root)

    @property
    def depth(self) -> int:
        """Number of layers above the leaves."""
        return len(self._layers) - 1

    def is_empty(self) -> bool:
        return not self.leaves

    def index_of(self, leaf: bytes) -> Optional[int]:
        """Position of a leaf in layer 0, or None."""
        return self._index.get(leaf)

    def get_leaf(self, index: int) -> bytes:
        """Get leaf at index."""
        return self.leaves[index]

    def __len__(self) -> int:
        return len(self.leaves)

    def __contains__(self, leaf: bytes) -> bool:
        return leaf in self._index

    # =========================================================================
    # Proofs
    # =========================================================================

    def prove_index(self, leaf_index: int) -> List[bytes]:
        """
        Generate Merkle proof for the leaf at a position.

        Args:
            leaf_index: Index of the leaf to prove

        Returns:
            Sibling hashes from the leaf layer up to just below the root.
            Layers where the node was carried up contribute nothing.
        """
        if leaf_index < 0 or leaf_index >= len(self.leaves):
            raise IndexError(f"Leaf index {leaf_index} out of range")

        proof = []
        idx = leaf_index

        for layer in self._layers[:-1]:
            sibling_idx = idx ^ 1
            if sibling_idx < len(layer):
                proof.append(layer[sibling_idx])
            idx = idx // 2

        return proof

    def prove(self, leaf: bytes) -> Optional[List[bytes]]:
        """
        Generate Merkle proof for a leaf.

        Args:
            leaf: 32-byte leaf hash

        Returns:
            Sibling path, or None if the leaf is not in the tree
            (not eligible)
        """
        index = self.index_of(leaf)
        if index is None:
            logger.debug(f"Leaf {bytes_to_hex(leaf)} not in tree")
            return None
        return self.prove_index(index)

    def hex_proof(self, leaf: bytes) -> Optional[List[str]]:
        """Proof as 0x-prefixed hex strings, or None if not found."""
        proof = self.prove(leaf)
        if proof is None:
            return None
        return [bytes_to_hex(sibling) for sibling in proof]


__all__ = [
    "MerkleTree",
    "hash_pair",
    "next_layer",
    "EMPTY_ROOT",
]
