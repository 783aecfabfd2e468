"""
ogclaim - Merkle ownership-snapshot claims

Commits an NFT ownership snapshot (tokenId -> owner) to a single Merkle
root and lets each owner prove their entry to claim on another chain:
- Canonical leaf encoding
- Sorted-pair Merkle tree, proofs and verification
- Root registry and claim ledger reference models
"""

__version__ = "0.1.0"
