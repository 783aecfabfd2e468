"""
Unit tests for cryptographic primitives and address handling.
"""

import pytest

from ogclaim.crypto import (
    keccak256,
    generate_keypair,
    private_key_to_public_key,
    address_from_public_key,
    parse_address,
    checksum_address,
    is_valid_address,
    bytes_to_hex,
    hex_to_bytes,
)


# EIP-55 reference vector
CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestHashing:
    """Tests for Keccak-256."""

    def test_keccak256_empty_vector(self):
        """Keccak-256 of empty input matches the EVM value (not SHA3-256)."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak256_length(self):
        """Keccak256 should produce 32 bytes."""
        assert len(keccak256(b"test")) == 32

    def test_keccak256_deterministic(self):
        assert keccak256(b"hello") == keccak256(b"hello")
        assert keccak256(b"a") != keccak256(b"b")


class TestKeyGeneration:
    """Tests for keypairs and address derivation."""

    def test_generate_keypair(self):
        kp = generate_keypair()
        assert len(kp.private_key) == 32
        assert len(kp.public_key) == 64
        assert len(kp.address_bytes) == 20

    def test_known_address(self):
        """Private key 1 maps to the well-known address."""
        public_key = private_key_to_public_key((1).to_bytes(32, "big"))
        address = address_from_public_key(public_key)
        assert checksum_address(address) == "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"

    def test_keypair_address_is_checksummed(self):
        kp = generate_keypair()
        assert kp.address == checksum_address(kp.address_bytes)

    def test_invalid_key_lengths(self):
        with pytest.raises(ValueError):
            private_key_to_public_key(b"\x01" * 31)
        with pytest.raises(ValueError):
            address_from_public_key(b"\x01" * 65)


class TestAddressParsing:
    """Tests for parse_address and EIP-55 handling."""

    def test_bytes_passthrough(self):
        assert parse_address(b"\xaa" * 20) == b"\xaa" * 20
        assert parse_address(bytearray(b"\xaa" * 20)) == b"\xaa" * 20

    def test_lowercase_and_uppercase_accepted(self):
        lower = "0x" + CHECKSUMMED[2:].lower()
        upper = "0x" + CHECKSUMMED[2:].upper()
        assert parse_address(lower) == parse_address(upper) == parse_address(CHECKSUMMED)

    def test_valid_checksum_accepted(self):
        assert checksum_address(parse_address(CHECKSUMMED)) == CHECKSUMMED

    def test_bad_checksum_rejected(self):
        """Mixed case with a flipped letter fails the checksum."""
        broken = "0x5aaeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        with pytest.raises(ValueError, match="checksum"):
            parse_address(broken)

    @pytest.mark.parametrize("bad", [
        "0x" + "a" * 39,       # too short
        "a" * 40,              # no 0x
        "0x" + "g" * 40,       # not hex
        b"\xaa" * 19,          # wrong width
        12345,                 # wrong type
    ])
    def test_malformed_rejected(self, bad):
        with pytest.raises(ValueError):
            parse_address(bad)

    def test_is_valid_address(self):
        assert is_valid_address("0x" + "a" * 40)
        assert is_valid_address(CHECKSUMMED)
        assert not is_valid_address("0x" + "a" * 39)
        assert not is_valid_address("0x" + "g" * 40)


class TestUtility:
    """Tests for utility functions."""

    def test_bytes_to_hex(self):
        assert bytes_to_hex(bytes([0xde, 0xad, 0xbe, 0xef])) == "0xdeadbeef"

    def test_hex_to_bytes(self):
        assert hex_to_bytes("0xdeadbeef") == bytes([0xde, 0xad, 0xbe, 0xef])
        assert hex_to_bytes("deadbeef") == bytes([0xde, 0xad, 0xbe, 0xef])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
