"""
hexcrc - CRC-32 Patcher for Intel HEX Firmware Images
=====================================================

This package reads a firmware image in Intel HEX format, rebuilds the
contiguous memory image it describes, computes a CRC-32 over it and writes
the checksum into the image's last 4 bytes, so the firmware can verify
itself at boot (for example with the STM32 hardware CRC unit).

Main Components
---------------
- **ihex**: Intel HEX record codec, image assembler, CRC engine, encoder
- **config**: Immutable checksum settings and numeric literal parsing
- **cli**: The `hexcrc` command-line tool

Quick Start
-----------
    >>> from hexcrc import HexFile, ChecksumConfig
    >>> hexfile = HexFile.from_file("firmware.hex", ChecksumConfig())
    >>> print(f"CRC = 0x{hexfile.crc:08X}")
    >>> hexfile.write()     # overwrite firmware.hex

Or use the command-line tool:
    $ hexcrc -i firmware -w -o firmware_crc.hex

Version History
---------------
1.6.0 - Configurable polynomial and fill value, 1 MiB image capacity
"""

__version__ = "1.6.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hexcrc.config import ChecksumConfig, parse_number
from hexcrc.errors import (
    HexCrcError,
    HexFormatError,
    RecordFormatError,
    ChecksumMismatchError,
    EmptyImageError,
    UnsupportedFeatureError,
    CapacityExceededError,
    FileExtensionError,
    ConfigError,
)
from hexcrc.ihex import (
    RecordType,
    Record,
    decode_line,
    encode_record,
    LinearAddress,
    AddressTracker,
    FirmwareImage,
    ImageAssembler,
    Crc32,
    crc32_words,
    compute_image_crc,
    patch_image_crc,
    render_image,
    HexFile,
)

__all__ = [
    "__version__",
    # Configuration
    "ChecksumConfig",
    "parse_number",
    # Exception hierarchy
    "HexCrcError",
    "HexFormatError",
    "RecordFormatError",
    "ChecksumMismatchError",
    "EmptyImageError",
    "UnsupportedFeatureError",
    "CapacityExceededError",
    "FileExtensionError",
    "ConfigError",
    # Intel HEX
    "RecordType",
    "Record",
    "decode_line",
    "encode_record",
    "LinearAddress",
    "AddressTracker",
    "FirmwareImage",
    "ImageAssembler",
    "Crc32",
    "crc32_words",
    "compute_image_crc",
    "patch_image_crc",
    "render_image",
    "HexFile",
]
