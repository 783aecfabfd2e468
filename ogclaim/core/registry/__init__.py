"""
ogclaim Registry Module.

Reference models of the claim-chain contracts: the versioned root holder
and the per-token claim ledger.
"""

from ogclaim.core.registry.root_registry import RootRegistry, RootRecord
from ogclaim.core.registry.claim_ledger import ClaimLedger, ClaimRecord

__all__ = [
    "RootRegistry",
    "RootRecord",
    "ClaimLedger",
    "ClaimRecord",
]
