"""
Leaf encoding - the single definition of what a leaf means.

Conceptual Background:
---------------------
A leaf commits to one (tokenId, owner) pair from the ownership snapshot.
The pair must be turned into bytes before hashing, and there are two
plausible ways to do it:

- ABI encoding: every field padded to a 32-byte word
      uint256 tokenId  -> 32 bytes, big-endian
      address owner    -> 12 zero bytes ++ 20 address bytes
  64 bytes total. Same as Solidity abi.encode(tokenId, owner).

- Packed encoding: fields at their natural width
      uint256 tokenId  -> 32 bytes
      address owner    -> 20 bytes
  52 bytes total. Same as Solidity abi.encodePacked(tokenId, owner).

The two produce different leaves for every pair and therefore different,
mutually incompatible roots. ABI encoding is canonical here. The packed
form is kept only as encode_leaf_packed() so mismatches can be diagnosed;
nothing that builds, persists or claims accepts it.
"""

from dataclasses import dataclass
from typing import Union

from ogclaim.crypto import keccak256, parse_address, checksum_address
from ogclaim.utils.validation import (
    require,
    validate_address,
    validate_token_id,
)


# =============================================================================
# Constants
# =============================================================================

# Tag written to every persisted root file
LEAF_ENCODING = "abi"
PACKED_ENCODING = "packed"

WORD_SIZE = 32
ABI_RECORD_SIZE = 2 * WORD_SIZE
PACKED_RECORD_SIZE = WORD_SIZE + 20


# =============================================================================
# Ownership Record
# =============================================================================


@dataclass(frozen=True)
class OwnershipRecord:
    """
    One entry of the ownership snapshot.

    Attributes:
        token_id: uint256 token identifier
        owner: 20-byte owner address
    """
    token_id: int
    owner: bytes

    def __post_init__(self):
        require(validate_token_id(self.token_id))
        require(validate_address(self.owner))
        object.__setattr__(self, "owner", bytes(self.owner))

    @classmethod
    def create(cls, token_id: int, owner: Union[str, bytes]) -> "OwnershipRecord":
        """Build a record from a hex or raw address."""
        return cls(token_id=token_id, owner=parse_address(owner))

    @property
    def owner_hex(self) -> str:
        """Owner address in EIP-55 checksum form."""
        return checksum_address(self.owner)

    def leaf(self) -> bytes:
        """Canonical leaf hash for this record."""
        return encode_leaf(self.token_id, self.owner)

    def to_dict(self) -> dict:
        return {"tokenId": self.token_id, "owner": self.owner_hex}


# =============================================================================
# Encoders
# =============================================================================


def _coerce(token_id: int, owner: Union[str, bytes]) -> bytes:
    require(validate_token_id(token_id))
    return parse_address(owner)


def abi_encode_record(token_id: int, owner: Union[str, bytes]) -> bytes:
    """
    abi.encode(uint256, address): two 32-byte words.

    Raises:
        ValueError: token_id out of uint256 range or malformed owner
    """
    owner_bytes = _coerce(token_id, owner)
    return token_id.to_bytes(WORD_SIZE, byteorder="big") + owner_bytes.rjust(WORD_SIZE, b"\x00")


def packed_encode_record(token_id: int, owner: Union[str, bytes]) -> bytes:
    """abi.encodePacked(uint256, address): 32 + 20 bytes."""
    owner_bytes = _coerce(token_id, owner)
    return token_id.to_bytes(WORD_SIZE, byteorder="big") + owner_bytes


def encode_leaf(token_id: int, owner: Union[str, bytes]) -> bytes:
    """
    Canonical leaf: keccak256(abi.encode(tokenId, owner)).

    Every tree, proof file and claim check goes through this function.
    """
    return keccak256(abi_encode_record(token_id, owner))


def encode_leaf_packed(token_id: int, owner: Union[str, bytes]) -> bytes:
    """
    Non-canonical leaf: keccak256(abi.encodePacked(tokenId, owner)).

    Diagnostic only. Never feed its output to MerkleTree.build for
    anything that gets published.
    """
    return keccak256(packed_encode_record(token_id, owner))


__all__ = [
    "OwnershipRecord",
    "abi_encode_record",
    "packed_encode_record",
    "encode_leaf",
    "encode_leaf_packed",
    "LEAF_ENCODING",
    "PACKED_ENCODING",
    "ABI_RECORD_SIZE",
    "PACKED_RECORD_SIZE",
]
