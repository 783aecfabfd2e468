"""
Merkle proof verification.

Standalone verification without the tree: a verifier only needs the leaf,
the sibling path and the root it expects. The same routine backs the
client pre-flight check, the claim ledger and the generator's self-check,
and mirrors what an on-chain MerkleProof.verify does.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ogclaim.crypto import bytes_to_hex, checksum_address
from ogclaim.core.merkle.encoding import (
    LEAF_ENCODING,
    PACKED_ENCODING,
    encode_leaf,
    encode_leaf_packed,
)
from ogclaim.core.merkle.tree import hash_pair
from ogclaim.utils.logger import get_logger
from ogclaim.utils.validation import validate_hash, validate_proof

logger = get_logger("merkle.proof")


# =============================================================================
# Verification
# =============================================================================


def process_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Recompute the root implied by a leaf and its sibling path.

    Uses the same sorted-pair rule as tree construction.
    """
    current = leaf
    for sibling in proof:
        current = hash_pair(current, sibling)
    return current


def verify_proof(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Verify a Merkle proof.

    Args:
        leaf: The leaf value being proven
        proof: Sibling hashes, leaf layer first
        root: Expected root hash

    Returns:
        True if proof is valid. Malformed inputs return False.
    """
    if not validate_hash(leaf, "leaf")[0] or not validate_hash(root, "root")[0]:
        return False
    if not validate_proof(proof)[0]:
        return False

    return process_proof(bytes(leaf), [bytes(s) for s in proof]) == bytes(root)


def verify_claim(
    token_id: int,
    owner: Union[str, bytes],
    proof: Sequence[bytes],
    root: bytes,
) -> bool:
    """
    Client pre-flight check for a (tokenId, owner) claim.

    Re-encodes the leaf with the canonical encoder, then verifies.
    Raises ValueError only for a malformed token_id or owner.
    """
    leaf = encode_leaf(token_id, owner)
    valid = verify_proof(leaf, proof, root)
    logger.debug(f"verify_claim token={token_id} valid={valid}")
    return valid


# =============================================================================
# Proof Bundle
# =============================================================================


@dataclass(frozen=True)
class ProofBundle:
    """
    Everything a client needs to pre-check and submit one claim.

    Attributes:
        token_id: Token being claimed
        owner: 20-byte owner address committed in the leaf
        proof: Sibling path
        root: Root the proof was generated against
    """
    token_id: int
    owner: bytes
    proof: tuple
    root: bytes

    @property
    def leaf(self) -> bytes:
        return encode_leaf(self.token_id, self.owner)

    @property
    def hex_proof(self) -> List[str]:
        return [bytes_to_hex(sibling) for sibling in self.proof]

    def verify(self, root: Optional[bytes] = None) -> bool:
        """Verify against the given root, or the one it was built for."""
        return verify_proof(self.leaf, self.proof, self.root if root is None else root)

    def to_dict(self) -> dict:
        """Proof file entry, original camelCase layout."""
        return {
            "tokenId": self.token_id,
            "owner": checksum_address(self.owner),
            "proof": self.hex_proof,
        }


# =============================================================================
# Diagnostics
# =============================================================================


@dataclass
class VerificationReport:
    """
    Step-by-step account of a claim verification.

    Attributes:
        token_id / owner: The claimed pair
        leaf: Canonical leaf
        packed_leaf: Leaf under the non-canonical packed encoding
        computed_root: Root recomputed from the canonical leaf
        expected_root: Root the proof was checked against
        valid: Canonical verification verdict
        matching_encoding: Which encoding reproduces the root, if any
    """
    token_id: int
    owner: str
    leaf: bytes
    packed_leaf: bytes
    proof: List[bytes]
    computed_root: bytes
    expected_root: bytes
    valid: bool
    matching_encoding: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    def lines(self) -> List[str]:
        """Human-readable rendering."""
        out = [
            f"Token ID:        {self.token_id}",
            f"Owner:           {self.owner}",
            f"Leaf (abi):      {bytes_to_hex(self.leaf)}",
            f"Leaf (packed):   {bytes_to_hex(self.packed_leaf)}",
            f"Proof length:    {len(self.proof)}",
            f"Computed root:   {bytes_to_hex(self.computed_root)}",
            f"Expected root:   {bytes_to_hex(self.expected_root)}",
            f"Proof valid:     {self.valid}",
        ]
        out.extend(f"Note: {note}" for note in self.notes)
        return out


def explain_verification(
    token_id: int,
    owner: Union[str, bytes],
    proof: Sequence[bytes],
    root: bytes,
) -> VerificationReport:
    """
    Verify a claim and explain the outcome.

    When the canonical leaf fails but the packed leaf reproduces the root,
    the proof came from a tree built with the wrong encoding.
    """
    leaf = encode_leaf(token_id, owner)
    packed_leaf = encode_leaf_packed(token_id, owner)
    siblings = [bytes(s) for s in proof]

    valid = verify_proof(leaf, siblings, root)
    report = VerificationReport(
        token_id=token_id,
        owner=checksum_address(owner),
        leaf=leaf,
        packed_leaf=packed_leaf,
        proof=siblings,
        computed_root=process_proof(leaf, siblings),
        expected_root=bytes(root),
        valid=valid,
    )

    if valid:
        report.matching_encoding = LEAF_ENCODING
    elif verify_proof(packed_leaf, siblings, root):
        report.matching_encoding = PACKED_ENCODING
        report.notes.append(
            "root was built from packed leaves; regenerate with the abi encoding"
        )
    else:
        report.notes.append("neither encoding reproduces the root (wrong proof, owner or stale root)")

    logger.debug(f"explain_verification token={token_id} valid={valid} match={report.matching_encoding}")
    return report


__all__ = [
    "process_proof",
    "verify_proof",
    "verify_claim",
    "ProofBundle",
    "VerificationReport",
    "explain_verification",
]
