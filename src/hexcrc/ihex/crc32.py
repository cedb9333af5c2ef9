"""
CRC-32 Implementation for Firmware Images
=========================================

This module implements the word-oriented CRC-32 used by microcontroller
CRC units (for example the STM32 CRC peripheral) to verify flash contents.
The checksum is stored in the last 4 bytes of the firmware image so the
device can check itself at boot.

Technical Details
-----------------
- Polynomial: configurable, default 0x04C11DB7
- Initial value: 0xFFFFFFFF
- Input: 32-bit little-endian words, processed MSB first
- No input or output reflection, no final XOR
- Equivalent to CRC-32/MPEG-2 over the bytes of each word in reverse order

Word Update
-----------
For every word w:

    crc ^= w
    repeat 32 times:
        if crc & 0x80000000: crc = (crc << 1) ^ poly
        else:                crc = crc << 1

Result Storage
--------------
The final accumulator is byte-reversed for display. The reversed value is
stored big-endian in the checksum slot, which leaves the raw accumulator in
little-endian order in memory.

Usage
-----
    from hexcrc.ihex.crc32 import crc32_words, byte_swap32

    checksum = crc32_words(bytes(4))          # 0xC704DD7B
    display = byte_swap32(checksum)           # 0x7BDD04C7
"""

from typing import Final, Optional

from hexcrc.config import ChecksumConfig, DEFAULT_POLYNOMIAL, DEFAULT_SEED
from hexcrc.errors import EmptyImageError
from hexcrc.ihex.assembler import FirmwareImage

# =============================================================================
# CRC-32 Constants
# =============================================================================

# Mask for 32-bit values
CRC_MASK: Final[int] = 0xFFFFFFFF

# Most significant bit of the accumulator
CRC_TOP_BIT: Final[int] = 0x80000000

# Bytes per CRC input word
CRC_WORD_SIZE: Final[int] = 4


# =============================================================================
# Bitwise Implementation
# =============================================================================

def crc32_update(crc: int, word: int, polynomial: int = DEFAULT_POLYNOMIAL) -> int:
    """
    Feed one 32-bit word into the CRC accumulator.

    Args:
        crc: Current accumulator value (the seed for the first word)
        word: The 32-bit input word
        polynomial: CRC generator polynomial

    Returns:
        The new accumulator value

    Example:
        >>> hex(crc32_update(0xFFFFFFFF, 0x00000000))
        '0xc704dd7b'
        >>> crc32_update(0xFFFFFFFF, 0xFFFFFFFF)
        0
    """
    crc = (crc ^ word) & CRC_MASK
    for _ in range(32):
        if crc & CRC_TOP_BIT:
            crc = ((crc << 1) ^ polynomial) & CRC_MASK
        else:
            crc = (crc << 1) & CRC_MASK
    return crc


def crc32_words(
    data: bytes,
    polynomial: int = DEFAULT_POLYNOMIAL,
    initial: int = DEFAULT_SEED,
) -> int:
    """
    Calculate the CRC of a byte sequence made of little-endian 32-bit words.

    Args:
        data: Input bytes; the length must be a multiple of 4
        polynomial: CRC generator polynomial
        initial: Initial accumulator value. Can be used for incremental
                 calculation over several chunks.

    Returns:
        32-bit CRC accumulator (not byte-reversed)

    Raises:
        ValueError: If the data length is not a multiple of 4
    """
    if len(data) % CRC_WORD_SIZE:
        raise ValueError(f"CRC input must be a multiple of 4 bytes, got {len(data)}")

    crc = initial
    for offset in range(0, len(data), CRC_WORD_SIZE):
        word = int.from_bytes(data[offset:offset + CRC_WORD_SIZE], "little")
        crc = crc32_update(crc, word, polynomial)
    return crc


class Crc32:
    """
    Incremental CRC-32 accumulator.

    Example:
        >>> crc = Crc32()
        >>> crc.update(bytes(4))
        >>> hex(crc.value)
        '0xc704dd7b'
    """

    def __init__(self, polynomial: int = DEFAULT_POLYNOMIAL, seed: int = DEFAULT_SEED) -> None:
        self.polynomial = polynomial
        self.seed = seed
        self.value = seed
        self.words = 0

    def update(self, data: bytes) -> None:
        """Feed whole 32-bit little-endian words into the accumulator."""
        self.value = crc32_words(data, self.polynomial, self.value)
        self.words += len(data) // CRC_WORD_SIZE

    def update_word(self, word: int) -> None:
        """Feed a single 32-bit word into the accumulator."""
        self.value = crc32_update(self.value, word, self.polynomial)
        self.words += 1

    def reset(self) -> None:
        self.value = self.seed
        self.words = 0


# =============================================================================
# Utility Functions
# =============================================================================

def byte_swap32(value: int) -> int:
    """
    Reverse the byte order of a 32-bit value.

    Example:
        >>> hex(byte_swap32(0xC704DD7B))
        '0x7bdd04c7'
    """
    return int.from_bytes((value & CRC_MASK).to_bytes(4, "little"), "big")


def crc_to_bytes(display_crc: int) -> bytes:
    """
    Convert a display CRC value to the 4 bytes stored in the image.

    Example:
        >>> crc_to_bytes(0x7BDD04C7)
        b'{\\xdd\\x04\\xc7'
    """
    return display_crc.to_bytes(4, "big")


def crc_from_bytes(data: bytes) -> int:
    """
    Read a display CRC value from a 4-byte checksum slot.

    Raises:
        ValueError: If data is not exactly 4 bytes
    """
    if len(data) != CRC_WORD_SIZE:
        raise ValueError(f"CRC requires 4 bytes, got {len(data)}")
    return int.from_bytes(data, "big")


# =============================================================================
# Image Checksum
# =============================================================================

def compute_image_crc(image: FirmwareImage, config: Optional[ChecksumConfig] = None) -> int:
    """
    Calculate the display CRC of a firmware image.

    The last 4 bytes of the image (the checksum slot) are not part of the
    CRC input.

    Args:
        image: An aligned FirmwareImage
        config: Polynomial and seed; defaults to ChecksumConfig()

    Returns:
        The byte-reversed CRC, as printed and stored

    Raises:
        EmptyImageError: If the image has no room for the checksum slot
    """
    config = config or ChecksumConfig()
    if len(image) < CRC_WORD_SIZE:
        raise EmptyImageError("image contains no data; nothing to checksum")

    return byte_swap32(crc32_words(image.body, config.polynomial, config.seed))


def patch_image_crc(image: FirmwareImage, config: Optional[ChecksumConfig] = None) -> int:
    """
    Calculate the CRC of an image and write it into the checksum slot.

    Args:
        image: An aligned FirmwareImage, modified in place
        config: Polynomial and seed; defaults to ChecksumConfig()

    Returns:
        The display CRC value
    """
    display_crc = compute_image_crc(image, config)
    image.data[-CRC_WORD_SIZE:] = crc_to_bytes(display_crc)
    return display_crc


def verify_image_crc(image: FirmwareImage, config: Optional[ChecksumConfig] = None) -> bool:
    """Check that the checksum slot of an image holds its CRC."""
    if len(image) < CRC_WORD_SIZE:
        return False
    return crc_from_bytes(image.checksum_slot) == compute_image_crc(image, config)
