"""
CRC-32 Engine Tests
===================

Tests for the word-oriented CRC-32 and image checksum patching.

Test Categories
---------------
1. Word Update: Known single-word values
2. Reference: Comparison with an independent bytewise CRC-32/MPEG-2
3. Incremental: Crc32 accumulator behaviour
4. Image: CRC calculation, patching and verification on images
"""

import pytest

from hexcrc.config import ChecksumConfig, DEFAULT_POLYNOMIAL
from hexcrc.errors import EmptyImageError
from hexcrc.ihex import (
    Crc32,
    FirmwareImage,
    assemble_image,
    byte_swap32,
    compute_image_crc,
    crc32_update,
    crc32_words,
    crc_from_bytes,
    crc_to_bytes,
    patch_image_crc,
    render_image,
    verify_image_crc,
)


# =============================================================================
# Reference Implementation
# =============================================================================

def reference_crc32_mpeg2(data: bytes, polynomial: int = DEFAULT_POLYNOMIAL) -> int:
    """
    Bytewise CRC-32/MPEG-2: MSB first, not reflected, init 0xFFFFFFFF, no final XOR.
    """
    crc = 0xFFFFFFFF
    for byte in data:
        crc ^= byte << 24
        for _ in range(8):
            if crc & 0x80000000:
                crc = ((crc << 1) ^ polynomial) & 0xFFFFFFFF
            else:
                crc = (crc << 1) & 0xFFFFFFFF
    return crc


def reverse_words(data: bytes) -> bytes:
    """Reverse the byte order inside every 4-byte word."""
    return b"".join(data[i:i + 4][::-1] for i in range(0, len(data), 4))


# =============================================================================
# Word Update Tests
# =============================================================================

class TestWordUpdate:
    """Tests for crc32_update()."""

    def test_reference_check_value(self):
        """Sanity check of the reference: CRC-32/MPEG-2 of '123456789'."""
        assert reference_crc32_mpeg2(b"123456789") == 0x0376E6E7

    def test_zero_word(self):
        """Known STM32 CRC unit result for a single zero word."""
        assert crc32_update(0xFFFFFFFF, 0x00000000) == 0xC704DD7B

    def test_all_ones_word(self):
        """XOR with the seed clears the accumulator; zero stays zero."""
        assert crc32_update(0xFFFFFFFF, 0xFFFFFFFF) == 0

    def test_result_fits_32_bits(self):
        for word in (0x12345678, 0x80000000, 0xDEADBEEF):
            assert 0 <= crc32_update(0xFFFFFFFF, word) <= 0xFFFFFFFF


# =============================================================================
# Reference Comparison Tests
# =============================================================================

class TestReference:
    """The word CRC equals CRC-32/MPEG-2 over byte-reversed words."""

    @pytest.mark.parametrize("data", [
        b"",
        bytes(4),
        b"\x01\x02\x03\x04",
        b"12345678",
        bytes(range(256)),
        b"\xde\xad\xbe\xef" * 9,
    ])
    def test_matches_reference(self, data):
        assert crc32_words(data) == reference_crc32_mpeg2(reverse_words(data))

    def test_matches_reference_custom_polynomial(self):
        data = bytes(range(64))
        polynomial = 0x1EDC6F41
        assert crc32_words(data, polynomial) == reference_crc32_mpeg2(reverse_words(data), polynomial)

    def test_deterministic(self):
        data = bytes(range(100, 200))
        assert crc32_words(data) == crc32_words(data)

    def test_empty_returns_seed(self):
        assert crc32_words(b"") == 0xFFFFFFFF
        assert crc32_words(b"", initial=0x1234) == 0x1234

    def test_rejects_partial_word(self):
        with pytest.raises(ValueError, match="multiple of 4"):
            crc32_words(b"\x01\x02\x03")


# =============================================================================
# Incremental Tests
# =============================================================================

class TestIncremental:
    """Tests for the Crc32 accumulator."""

    def test_initial_value(self):
        assert Crc32().value == 0xFFFFFFFF

    def test_incremental_matches_one_shot(self):
        data = bytes(range(64))
        crc = Crc32()
        crc.update(data[:16])
        crc.update(data[16:])
        assert crc.value == crc32_words(data)
        assert crc.words == 16

    def test_update_word(self):
        crc = Crc32()
        crc.update_word(0x04030201)
        assert crc.value == crc32_words(b"\x01\x02\x03\x04")

    def test_reset(self):
        crc = Crc32(seed=0)
        crc.update(bytes(8))
        crc.reset()
        assert crc.value == 0
        assert crc.words == 0

    def test_custom_polynomial_changes_result(self):
        default = Crc32()
        custom = Crc32(polynomial=0x1EDC6F41)
        default.update(bytes(4))
        custom.update(bytes(4))
        assert default.value != custom.value


# =============================================================================
# Utility Tests
# =============================================================================

class TestUtilities:

    def test_byte_swap32(self):
        assert byte_swap32(0xC704DD7B) == 0x7BDD04C7
        assert byte_swap32(0x12345678) == 0x78563412

    def test_crc_to_bytes(self):
        assert crc_to_bytes(0x7BDD04C7) == bytes([0x7B, 0xDD, 0x04, 0xC7])

    def test_crc_from_bytes(self):
        assert crc_from_bytes(bytes([0x7B, 0xDD, 0x04, 0xC7])) == 0x7BDD04C7

    def test_crc_from_bytes_wrong_length(self):
        with pytest.raises(ValueError):
            crc_from_bytes(b"\x00\x01")


# =============================================================================
# Image Checksum Tests
# =============================================================================

class TestImageCrc:
    """Tests for CRC calculation on firmware images."""

    def test_checksum_slot_excluded(self):
        """Only the bytes before the last word are checksummed."""
        a = FirmwareImage(data=bytearray(bytes(4) + b"\x11\x22\x33\x44"))
        b = FirmwareImage(data=bytearray(bytes(4) + b"\x55\x66\x77\x88"))
        assert compute_image_crc(a) == compute_image_crc(b) == 0x7BDD04C7

    def test_single_word_image(self):
        """An image holding only the checksum slot has the seed as CRC."""
        image = FirmwareImage(data=bytearray(b"\x48\x69\xff\xff"))
        assert compute_image_crc(image) == 0xFFFFFFFF

    def test_patch_writes_last_four_bytes(self):
        image = FirmwareImage(data=bytearray(8))
        crc = patch_image_crc(image)
        assert crc == 0x7BDD04C7
        assert image.to_bytes() == bytes([0, 0, 0, 0, 0x7B, 0xDD, 0x04, 0xC7])

    def test_stored_bytes_are_raw_accumulator_little_endian(self):
        image = FirmwareImage(data=bytearray(range(16)))
        patch_image_crc(image)
        raw = crc32_words(bytes(range(12)))
        assert image.checksum_slot == raw.to_bytes(4, "little")

    def test_patch_with_custom_polynomial(self):
        config = ChecksumConfig(polynomial=0x1EDC6F41)
        image = FirmwareImage(data=bytearray(8))
        crc = patch_image_crc(image, config)
        assert crc == byte_swap32(crc32_words(bytes(4), 0x1EDC6F41))
        assert crc != 0x7BDD04C7

    def test_verify(self):
        image = FirmwareImage(data=bytearray(range(32)))
        assert not verify_image_crc(image)
        patch_image_crc(image)
        assert verify_image_crc(image)

    def test_empty_image(self):
        with pytest.raises(EmptyImageError):
            compute_image_crc(FirmwareImage())
        assert not verify_image_crc(FirmwareImage())

    def test_stable_after_reencoding(self):
        """Re-reading a patched image and patching again gives the same CRC."""
        image = assemble_image([":1000000000112233445566778899AABBCCDDEEFFF8", ":00000001FF"])
        crc = patch_image_crc(image)

        rebuilt = assemble_image(render_image(image))
        assert rebuilt.to_bytes() == image.to_bytes()
        assert patch_image_crc(rebuilt) == crc
        assert rebuilt.to_bytes() == image.to_bytes()
