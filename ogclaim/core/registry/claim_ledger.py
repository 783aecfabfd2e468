"""
Claim Ledger - reference model of the on-chain claim contract.

A claim for tokenId succeeds only if:
1. A root has been published
2. The token has not been claimed before
3. keccak256(abi.encode(tokenId, claimer)) verifies against the registry's
   CURRENT root with the supplied proof

The claimed flag is written exactly once. Proofs for a superseded root fail
check 3; there is no fallback to older roots.

preflight() is the client-side version of the same checks. It only saves a
doomed submission; claim() remains the authorization.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple, Union
import time

from ogclaim.crypto import checksum_address, parse_address
from ogclaim.core.merkle import ProofBundle, encode_leaf, verify_proof
from ogclaim.core.registry.root_registry import RootRegistry
from ogclaim.utils.logger import get_logger
from ogclaim.utils.validation import validate_proof, validate_token_id

logger = get_logger("claims")


@dataclass(frozen=True)
class ClaimRecord:
    """
    A successful claim.

    Attributes:
        token_id: Claimed token
        claimer: Address that claimed (the owner committed in the leaf)
        root_version: Registry version the proof verified against
        claimed_at: Claim timestamp
    """
    token_id: int
    claimer: bytes
    root_version: int
    claimed_at: int = field(default_factory=lambda: int(time.time()))


class ClaimLedger:
    """
    Per-token claimed flags guarded by Merkle proofs.
    """

    def __init__(self, registry: RootRegistry, storage=None):
        """
        Initialize the ledger.

        Args:
            registry: Source of the current root
            storage: Optional StorageManager; claims are reloaded from it
        """
        self.registry = registry
        self.storage = storage
        self._claims: Dict[int, ClaimRecord] = {}

        if storage is not None:
            for token_id, claimer, root_version, claimed_at in storage.load_claims():
                self._claims[token_id] = ClaimRecord(token_id, claimer, root_version, claimed_at)

        logger.info(f"ClaimLedger initialized with {len(self._claims)} existing claims")

    # =========================================================================
    # Reads
    # =========================================================================

    def is_claimed(self, token_id: int) -> bool:
        return token_id in self._claims

    def claim_record(self, token_id: int) -> Optional[ClaimRecord]:
        return self._claims.get(token_id)

    @property
    def claimed_count(self) -> int:
        return len(self._claims)

    # =========================================================================
    # Claims
    # =========================================================================

    def claim(
        self,
        token_id: int,
        claimer: Union[str, bytes],
        proof: Sequence[bytes],
    ) -> Tuple[Optional[ClaimRecord], str]:
        """
        Claim a token.

        Args:
            token_id: Token to claim
            claimer: Address submitting the claim
            proof: Sibling path for (token_id, claimer)

        Returns:
            (record, error_message) - record is None on failure
        """
        valid, err = validate_token_id(token_id)
        if not valid:
            return None, err
        try:
            claimer = parse_address(claimer)
        except ValueError as e:
            return None, str(e)
        valid, err = validate_proof(proof)
        if not valid:
            return None, err

        root_record = self.registry.current_record()
        if root_record is None:
            return None, "No root published"

        if self.is_claimed(token_id):
            return None, f"Token {token_id} already claimed"

        leaf = encode_leaf(token_id, claimer)
        if not verify_proof(leaf, proof, root_record.root):
            logger.warning(
                f"Rejected claim for token {token_id} by {checksum_address(claimer)}: invalid proof"
            )
            return None, "Invalid proof"

        record = ClaimRecord(token_id=token_id, claimer=claimer, root_version=root_record.version)
        if self.storage is not None:
            if not self.storage.persist_claim(token_id, claimer, record.root_version, record.claimed_at):
                return None, f"Token {token_id} already claimed"
        self._claims[token_id] = record

        logger.info(f"Token {token_id} claimed by {checksum_address(claimer)} (root v{record.root_version})")
        return record, ""

    def claim_bundle(self, bundle: ProofBundle) -> Tuple[Optional[ClaimRecord], str]:
        """Claim using a distributed proof bundle; the bundle owner is the claimer."""
        return self.claim(bundle.token_id, bundle.owner, bundle.proof)

    def preflight(self, bundle: ProofBundle) -> Tuple[bool, str]:
        """
        Off-chain check before submitting a claim.

        Returns:
            (ok, reason) - reason explains a predicted rejection
        """
        current = self.registry.current_root()
        if current is None:
            return False, "No root published"

        if self.is_claimed(bundle.token_id):
            return False, f"Token {bundle.token_id} already claimed"

        if bundle.verify(current):
            return True, ""

        if bundle.root != current and bundle.verify():
            version = self.registry.find_version(bundle.root)
            label = f"v{version}" if version else "an unpublished root"
            return False, f"Stale root: proof was generated for {label}, current is v{self.registry.version}"

        return False, "Invalid proof"


__all__ = ["ClaimRecord", "ClaimLedger"]
