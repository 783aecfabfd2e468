"""
Root and proof generation.

Turns a snapshot into the two artifacts that leave the system:
- the root, published to the RootRegistry
- one proof per token, distributed to claimants

Every proof is checked against the root before it is handed out.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ogclaim.crypto import bytes_to_hex
from ogclaim.core.merkle import MerkleTree, ProofBundle, verify_proof
from ogclaim.core.snapshot import Snapshot
from ogclaim.core.storage.files import write_proofs_file, write_root_file
from ogclaim.utils.logger import get_logger

logger = get_logger("generator")

ROOT_FILE = "merkleRoot.json"
PROOFS_FILE = "merkleProofs.json"


@dataclass
class GenerationResult:
    """
    Output of one generation run.

    Attributes:
        tree: The committed tree
        proofs: token_id -> ProofBundle, in tokenId order
    """
    tree: MerkleTree
    proofs: Dict[int, ProofBundle] = field(default_factory=dict)

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def leaf_count(self) -> int:
        return len(self.tree)

    def proof_for(self, token_id: int) -> Optional[ProofBundle]:
        return self.proofs.get(token_id)


def generate(snapshot: Snapshot) -> GenerationResult:
    """
    Build the tree for a snapshot and a proof for every record.

    Raises:
        RuntimeError: a generated proof does not verify (builder bug)
    """
    tree = MerkleTree.build(snapshot.leaves())
    result = GenerationResult(tree=tree)

    for index, record in enumerate(snapshot):
        leaf = tree.get_leaf(index)
        proof = tree.prove_index(index)
        if not verify_proof(leaf, proof, tree.root):
            raise RuntimeError(f"Generated proof for token {record.token_id} does not verify")
        result.proofs[record.token_id] = ProofBundle(
            token_id=record.token_id,
            owner=record.owner,
            proof=tuple(proof),
            root=tree.root,
        )

    logger.info(f"Generated {len(result.proofs)} proofs for root {bytes_to_hex(result.root)}")
    return result


def write_outputs(result: GenerationResult, out_dir: Union[str, Path]) -> Tuple[Path, Path]:
    """
    Write merkleRoot.json and merkleProofs.json.

    Returns:
        (root_path, proofs_path)
    """
    out_dir = Path(out_dir)
    root_path = out_dir / ROOT_FILE
    proofs_path = out_dir / PROOFS_FILE

    write_root_file(root_path, result.root, result.leaf_count)
    write_proofs_file(proofs_path, result.proofs.values())

    logger.info(f"Wrote {root_path} and {proofs_path}")
    return root_path, proofs_path


__all__ = ["GenerationResult", "generate", "write_outputs", "ROOT_FILE", "PROOFS_FILE"]
