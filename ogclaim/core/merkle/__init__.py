"""
Merkle commitment core: leaf encoding, tree construction, proofs, verification.

Every caller (generator, CLI, claim ledger, tests) imports from here so
there is exactly one encoding and one pairing rule in the codebase.
"""

from ogclaim.core.merkle.encoding import (
    OwnershipRecord,
    abi_encode_record,
    packed_encode_record,
    encode_leaf,
    encode_leaf_packed,
    LEAF_ENCODING,
    PACKED_ENCODING,
)
from ogclaim.core.merkle.tree import MerkleTree, hash_pair, EMPTY_ROOT
from ogclaim.core.merkle.proof import (
    process_proof,
    verify_proof,
    verify_claim,
    explain_verification,
    ProofBundle,
    VerificationReport,
)

__all__ = [
    "OwnershipRecord",
    "abi_encode_record",
    "packed_encode_record",
    "encode_leaf",
    "encode_leaf_packed",
    "LEAF_ENCODING",
    "PACKED_ENCODING",
    "MerkleTree",
    "hash_pair",
    "EMPTY_ROOT",
    "process_proof",
    "verify_proof",
    "verify_claim",
    "explain_verification",
    "ProofBundle",
    "VerificationReport",
]
