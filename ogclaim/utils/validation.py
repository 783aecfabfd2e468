"""
Input Validation - Boundary checks for everything that reaches the tree.

Catches, before any hashing happens:
- Wrong-width addresses, leaves, roots and proof siblings
- Token IDs outside the uint256 range
- Malformed hex in snapshot, root and proof files

Each validator returns (is_valid, error_message). require() turns a failed
check into a ValueError for callers that must fail fast.
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20
HASH_SIZE = 32

# uint256 bounds
MIN_TOKEN_ID = 0
MAX_TOKEN_ID = 2**256 - 1

# One sibling per layer; a uint256-sized snapshot needs at most 256 layers
MAX_PROOF_LENGTH = 256


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(data: Any, name: str, expected_length: Optional[int] = None) -> Tuple[bool, str]:
    """
    Check for a bytes-like value, optionally of an exact width.

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"
    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"
    return True, ""


def validate_address(address: Any) -> Tuple[bool, str]:
    """Validate a raw 20-byte address."""
    return validate_bytes(address, "address", expected_length=ADDRESS_SIZE)


def validate_hash(hash_value: Any, name: str = "hash") -> Tuple[bool, str]:
    """Validate a 32-byte leaf, node or root."""
    return validate_bytes(hash_value, name, expected_length=HASH_SIZE)


def validate_integer(value: Any, name: str, min_val: int, max_val: int) -> Tuple[bool, str]:
    """
    Validate an int in [min_val, max_val].

    bool is rejected even though it subclasses int: True is not token 1.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"
    if not min_val <= value <= max_val:
        return False, f"{name} out of range [{min_val}, {max_val}]: {value}"
    return True, ""


def validate_token_id(token_id: Any) -> Tuple[bool, str]:
    """Validate a uint256 token ID."""
    return validate_integer(token_id, "token_id", MIN_TOKEN_ID, MAX_TOKEN_ID)


def validate_proof(proof: Any, name: str = "proof") -> Tuple[bool, str]:
    """Validate a sibling-hash path: a list/tuple of 32-byte values."""
    if not isinstance(proof, (list, tuple)):
        return False, f"{name} must be list/tuple, got {type(proof).__name__}"

    if len(proof) > MAX_PROOF_LENGTH:
        return False, f"{name} has {len(proof)} siblings, max is {MAX_PROOF_LENGTH}"

    for i, sibling in enumerate(proof):
        valid, err = validate_hash(sibling, f"{name}[{i}]")
        if not valid:
            return False, err

    return True, ""


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate hex text as found in JSON files and CLI arguments.

    The 0x prefix is optional. expected_bytes fixes the decoded width.
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    digits = value[2:] if value[:2] in ("0x", "0X") else value
    try:
        decoded = bytes.fromhex(digits)
    except ValueError:
        return False, f"{name} is not valid hex: {value!r}"

    if expected_bytes is not None and len(decoded) != expected_bytes:
        return False, f"{name} must be {expected_bytes} bytes, got {len(decoded)}"

    return True, ""


def require(check: Tuple[bool, str]) -> None:
    """Raise ValueError if a validator reported a failure."""
    valid, err = check
    if not valid:
        raise ValueError(err)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_hash",
    "validate_integer",
    "validate_token_id",
    "validate_proof",
    "validate_hex_string",
    "require",
    "ADDRESS_SIZE",
    "HASH_SIZE",
    "MIN_TOKEN_ID",
    "MAX_TOKEN_ID",
    "MAX_PROOF_LENGTH",
]
