"""
JSON documents exchanged with the outside world.

Three files, same names and layouts the claim front-end already consumes:

    zoraSnapshot.json   [{"tokenId": 1, "owner": "0x..."}, ...]
    merkleRoot.json     {"merkleRoot": "0x...", "encoding": "abi", "leafCount": n}
    merkleProofs.json   [{"tokenId": 1, "owner": "0x...", "proof": ["0x...", ...]}, ...]

Models validate on the way in, so a malformed file fails at load time
rather than as a mysterious verification failure later.
"""

import json
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ogclaim.crypto import bytes_to_hex, checksum_address, hex_to_bytes, parse_address
from ogclaim.core.merkle import LEAF_ENCODING, OwnershipRecord, ProofBundle
from ogclaim.utils.logger import get_logger
from ogclaim.utils.validation import HASH_SIZE, require, validate_hex_string, validate_token_id

logger = get_logger("storage.files")


# =============================================================================
# Field Helpers
# =============================================================================


def _check_hash_hex(value: str, name: str) -> str:
    valid, err = validate_hex_string(value, name, expected_bytes=HASH_SIZE)
    if not valid:
        raise ValueError(err)
    if not value.startswith(("0x", "0X")):
        value = "0x" + value
    return value.lower()


def _check_token_id(value) -> int:
    # Runs before pydantic coercion: JSON true and 1.0 are not token 1
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    require(validate_token_id(value))
    return value


# =============================================================================
# Models
# =============================================================================


class SnapshotEntry(BaseModel):
    """One row of the ownership snapshot file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token_id: int = Field(alias="tokenId")
    owner: str

    @field_validator("token_id", mode="before")
    @classmethod
    def check_token_id(cls, value):
        return _check_token_id(value)

    @field_validator("owner")
    @classmethod
    def check_owner(cls, value: str) -> str:
        return checksum_address(value)

    def to_record(self) -> OwnershipRecord:
        return OwnershipRecord.create(self.token_id, self.owner)


class ProofEntry(BaseModel):
    """One row of the proof distribution file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token_id: int = Field(alias="tokenId")
    owner: str
    proof: List[str]

    @field_validator("token_id", mode="before")
    @classmethod
    def check_token_id(cls, value):
        return _check_token_id(value)

    @field_validator("owner")
    @classmethod
    def check_owner(cls, value: str) -> str:
        return checksum_address(value)

    @field_validator("proof")
    @classmethod
    def check_proof(cls, value: List[str]) -> List[str]:
        return [_check_hash_hex(item, f"proof[{i}]") for i, item in enumerate(value)]

    def to_bundle(self, root: bytes) -> ProofBundle:
        return ProofBundle(
            token_id=self.token_id,
            owner=parse_address(self.owner),
            proof=tuple(hex_to_bytes(item) for item in self.proof),
            root=root,
        )


class RootFile(BaseModel):
    """The published root and how its leaves were encoded."""

    model_config = ConfigDict(populate_by_name=True)

    merkle_root: str = Field(alias="merkleRoot")
    encoding: Optional[str] = None
    leaf_count: Optional[int] = Field(default=None, alias="leafCount", ge=0)

    @field_validator("merkle_root")
    @classmethod
    def check_root(cls, value: str) -> str:
        return _check_hash_hex(value, "merkleRoot")

    @property
    def root(self) -> bytes:
        return hex_to_bytes(self.merkle_root)


_snapshot_adapter = TypeAdapter(List[SnapshotEntry])
_proofs_adapter = TypeAdapter(List[ProofEntry])


# =============================================================================
# Readers / Writers
# =============================================================================


def read_snapshot_file(path: Union[str, Path]) -> List[SnapshotEntry]:
    """Load and validate a snapshot file."""
    entries = _snapshot_adapter.validate_json(Path(path).read_bytes())
    logger.debug(f"Read {len(entries)} snapshot entries from {path}")
    return entries


def write_snapshot_file(path: Union[str, Path], records: Iterable[OwnershipRecord]):
    """Write records in the snapshot file layout."""
    _write_json(path, [record.to_dict() for record in records])


def read_root_file(path: Union[str, Path]) -> RootFile:
    """
    Load a root file.

    Raises:
        ValueError: the file declares a leaf encoding other than the
            canonical one
    """
    root_file = RootFile.model_validate_json(Path(path).read_bytes())
    if root_file.encoding is None:
        logger.warning(f"{path} has no encoding tag; assuming '{LEAF_ENCODING}'")
    elif root_file.encoding != LEAF_ENCODING:
        raise ValueError(
            f"{path} was built with '{root_file.encoding}' leaves; only '{LEAF_ENCODING}' is supported"
        )
    return root_file


def write_root_file(path: Union[str, Path], root: bytes, leaf_count: int):
    _write_json(path, {
        "merkleRoot": bytes_to_hex(root),
        "encoding": LEAF_ENCODING,
        "leafCount": leaf_count,
    })


def read_proofs_file(path: Union[str, Path]) -> List[ProofEntry]:
    """Load and validate a proof distribution file."""
    entries = _proofs_adapter.validate_json(Path(path).read_bytes())
    logger.debug(f"Read {len(entries)} proof entries from {path}")
    return entries


def write_proofs_file(path: Union[str, Path], bundles: Iterable[ProofBundle]):
    """Write proofs in order, one entry per bundle."""
    _write_json(path, [bundle.to_dict() for bundle in bundles])


def find_proof(entries: Iterable[ProofEntry], token_id: int) -> Optional[ProofEntry]:
    for entry in entries:
        if entry.token_id == token_id:
            return entry
    return None


def _write_json(path: Union[str, Path], payload):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))
    logger.debug(f"Wrote {path}")
