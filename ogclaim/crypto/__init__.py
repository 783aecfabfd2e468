"""
Cryptographic primitives for ogclaim.

This module provides:
- Keccak-256 hashing (the hash behind every leaf and tree node)
- secp256k1 key generation and Ethereum-style address derivation
- Address parsing and EIP-55 checksum rendering

Design Notes:
-------------
Keccak-256 is the pre-standard SHA-3 used by the EVM. It is NOT the same
function as hashlib.sha3_256, so it comes from pycryptodome.

Addresses travel through the system as 20 raw bytes. Hex strings are only
accepted at the boundary (snapshot files, CLI arguments) and are converted
with parse_address(), which enforces the EIP-55 checksum whenever the input
is mixed-case.
"""

import secrets
from dataclasses import dataclass
from typing import Union

from Crypto.Hash import keccak
from eth_utils import (
    is_checksum_address,
    is_hex_address,
    to_canonical_address,
    to_checksum_address,
)
from py_ecc.secp256k1 import secp256k1


# =============================================================================
# Constants
# =============================================================================

# secp256k1 curve order (number of points on the curve)
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

HASH_SIZE = 32
ADDRESS_SIZE = 20


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: leaf hashes, Merkle node hashes, address derivation.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Key Generation
# =============================================================================


@dataclass
class KeyPair:
    """
    An ECDSA keypair on secp256k1.

    Attributes:
        private_key: 32-byte secret key (integer in [1, order-1])
        public_key: 64-byte uncompressed public key (x || y coordinates)
    """
    private_key: bytes  # 32 bytes
    public_key: bytes   # 64 bytes (uncompressed, no 0x04 prefix)

    @property
    def address_bytes(self) -> bytes:
        """20-byte address derived from the public key."""
        return address_from_public_key(self.public_key)

    @property
    def address(self) -> str:
        """EIP-55 checksummed address string."""
        return to_checksum_address(self.address_bytes)


def generate_keypair() -> KeyPair:
    """
    Generate a new random keypair.

    Uses cryptographically secure random number generator.
    """
    private_key_int = secrets.randbelow(SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Derive public key from private key.

    Args:
        private_key: 32-byte private key

    Returns:
        64-byte uncompressed public key
    """
    if len(private_key) != 32:
        raise ValueError("Private key must be 32 bytes")

    public_key_point = secp256k1.privtopub(private_key)
    x_bytes = public_key_point[0].to_bytes(32, byteorder="big")
    y_bytes = public_key_point[1].to_bytes(32, byteorder="big")
    return x_bytes + y_bytes


def address_from_public_key(public_key: bytes) -> bytes:
    """
    Address = last 20 bytes of keccak256(public_key).
    """
    if len(public_key) != 64:
        raise ValueError("Public key must be 64 bytes")
    return keccak256(public_key)[-ADDRESS_SIZE:]


# =============================================================================
# Address Handling
# =============================================================================


def parse_address(address: Union[str, bytes]) -> bytes:
    """
    Convert an address to its 20-byte form.

    Accepts raw bytes or a 0x-prefixed hex string. Mixed-case strings
    must carry a valid EIP-55 checksum.

    Raises:
        ValueError: malformed address
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(address)}")
        return bytes(address)

    if not isinstance(address, str):
        raise ValueError(f"Address must be str or bytes, got {type(address).__name__}")

    if not address.startswith(("0x", "0X")) or not is_hex_address(address):
        raise ValueError(f"Invalid address: {address!r}")

    body = address[2:]
    if body != body.lower() and body != body.upper() and not is_checksum_address(address):
        raise ValueError(f"Bad EIP-55 checksum: {address}")

    return to_canonical_address(address)


def checksum_address(address: Union[str, bytes]) -> str:
    """Render an address in EIP-55 checksum form."""
    return to_checksum_address(parse_address(address))


def is_valid_address(address: str) -> bool:
    """Check if string is a valid address format."""
    try:
        parse_address(address)
    except ValueError:
        return False
    return True


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


__all__ = [
    "keccak256",
    "KeyPair",
    "generate_keypair",
    "private_key_to_public_key",
    "address_from_public_key",
    "parse_address",
    "checksum_address",
    "is_valid_address",
    "bytes_to_hex",
    "hex_to_bytes",
    "SECP256K1_ORDER",
    "HASH_SIZE",
    "ADDRESS_SIZE",
]
