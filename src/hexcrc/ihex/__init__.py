"""
Intel HEX Handling
==================

This package reads Intel HEX firmware images, rebuilds the memory image
they describe, checksums it with a word-oriented CRC-32, and writes the
patched image back out as Intel HEX.

This module provides:
- **Record codec**: decode_line() / encode_record() for single lines
- **AddressTracker**: base/extension address state across records
- **ImageAssembler**: contiguous image reconstruction with gap filling
- **CRC-32**: configurable polynomial, stored in the image's last 4 bytes
- **Encoder**: image back to an ordered record stream
- **HexFile**: the whole pipeline in one object

Quick Start
-----------
Checksum a file and write the result:

    >>> from hexcrc.ihex import HexFile
    >>> hexfile = HexFile.from_file("firmware.hex")
    >>> print(f"CRC = 0x{hexfile.crc:08X}")
    >>> hexfile.write("firmware_crc.hex")

Work with single records:

    >>> from hexcrc.ihex import decode_line, encode_record
    >>> record = decode_line(":0200000048694D")
    >>> encode_record(record)
    ':0200000048694D'

Reference
---------
- Intel Hexadecimal Object File Format Specification, Rev. A
"""

from hexcrc.ihex.records import (
    RecordType,
    Record,
    compute_checksum,
    decode_line,
    encode_record,
    MAX_DATA_BYTES,
)

from hexcrc.ihex.address import (
    LinearAddress,
    AddressTracker,
    TrackerAction,
)

from hexcrc.ihex.assembler import (
    FirmwareImage,
    ImageAssembler,
    assemble_image,
)

from hexcrc.ihex.crc32 import (
    Crc32,
    crc32_update,
    crc32_words,
    byte_swap32,
    crc_to_bytes,
    crc_from_bytes,
    compute_image_crc,
    patch_image_crc,
    verify_image_crc,
)

from hexcrc.ihex.encoder import (
    iter_image_records,
    encode_image,
    render_image,
)

from hexcrc.ihex.hexfile import (
    HexFile,
    resolve_hex_path,
)

__all__ = [
    # Records
    "RecordType",
    "Record",
    "compute_checksum",
    "decode_line",
    "encode_record",
    "MAX_DATA_BYTES",
    # Address tracking
    "LinearAddress",
    "AddressTracker",
    "TrackerAction",
    # Assembly
    "FirmwareImage",
    "ImageAssembler",
    "assemble_image",
    # CRC
    "Crc32",
    "crc32_update",
    "crc32_words",
    "byte_swap32",
    "crc_to_bytes",
    "crc_from_bytes",
    "compute_image_crc",
    "patch_image_crc",
    "verify_image_crc",
    # Encoding
    "iter_image_records",
    "encode_image",
    "render_image",
    # Files
    "HexFile",
    "resolve_hex_path",
]
