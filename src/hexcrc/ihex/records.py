"""
Intel HEX Record Definitions
============================

This module defines the record data structure and the line codec for the
Intel HEX format. Every line of a .hex file is one record.

Record Format
-------------
    :BBAAAATT[DD...]CC

    Char 0:      ':' start code
    Chars 1-2:   BB   byte count (number of payload bytes, 0-16 here)
    Chars 3-6:   AAAA 16-bit address, big-endian
    Chars 7-8:   TT   record type
    Chars 9+:    DD   payload, two hex digits per byte
    Last 2:      CC   checksum

The checksum is the two's complement of the low byte of the sum of the
byte count, both address bytes, the type and every payload byte. Summing
all bytes of a valid record, checksum included, gives 0 modulo 256.

Checksum Placement
------------------
A full record (16 payload bytes) keeps its checksum in the fixed trailing
slot at character 41. Shorter records place it immediately after the
payload. Both rules must be followed for compatibility with existing
tooling.

Record Types
------------
- 00: Data
- 01: End of file
- 02: Extended segment address (20-bit addressing, unsupported)
- 03: Start segment address (CS:IP)
- 04: Extended linear address (upper 16 bits of a 32-bit address)
- 05: Start linear address (EIP)

Reference
---------
- Intel Hexadecimal Object File Format Specification, Rev. A
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final, Optional
import re

from hexcrc.errors import ChecksumMismatchError, RecordFormatError


# =============================================================================
# Format Constants
# =============================================================================

# Every record starts with a colon
START_CODE: Final[str] = ":"

# Maximum payload bytes per record handled by this tool
MAX_DATA_BYTES: Final[int] = 16

# Character offsets within a line
BYTE_COUNT_OFFSET: Final[int] = 1
ADDRESS_OFFSET: Final[int] = 3
TYPE_OFFSET: Final[int] = 7
DATA_OFFSET: Final[int] = 9

# Fixed checksum slot used by full (16-byte) records
CHECKSUM_SLOT: Final[int] = DATA_OFFSET + 2 * MAX_DATA_BYTES

# Shortest possible line: ':' + count + address + type + checksum
MIN_LINE_LENGTH: Final[int] = DATA_OFFSET + 2

_HEX_FIELD = re.compile(r"[0-9A-Fa-f]+")


# =============================================================================
# Enumeration Types
# =============================================================================

class RecordType(IntEnum):
    """
    Intel HEX record type identifiers.

    The set is closed: any other type code in an input file is rejected
    by decode_line().
    """
    DATA = 0x00
    END_OF_FILE = 0x01
    EXTENDED_SEGMENT_ADDRESS = 0x02
    START_SEGMENT_ADDRESS = 0x03
    EXTENDED_LINEAR_ADDRESS = 0x04
    START_LINEAR_ADDRESS = 0x05

    def get_description(self) -> str:
        """Get a human-readable name for the record type."""
        descriptions = {
            RecordType.DATA: "Data",
            RecordType.END_OF_FILE: "End Of File",
            RecordType.EXTENDED_SEGMENT_ADDRESS: "Extended Segment Address",
            RecordType.START_SEGMENT_ADDRESS: "Start Segment Address",
            RecordType.EXTENDED_LINEAR_ADDRESS: "Extended Linear Address",
            RecordType.START_LINEAR_ADDRESS: "Start Linear Address",
        }
        return descriptions[self]


# =============================================================================
# Checksum
# =============================================================================

def compute_checksum(
    byte_count: int,
    address: int,
    record_type: int,
    data: bytes,
) -> int:
    """
    Calculate the checksum byte of a record.

    Args:
        byte_count: Number of payload bytes
        address: 16-bit record address
        record_type: Record type code
        data: Payload bytes

    Returns:
        The checksum byte (0x00 - 0xFF)

    Example:
        >>> f"{compute_checksum(2, 0x0000, 0x00, bytes([0x48, 0x69])):02X}"
        '4D'
    """
    total = byte_count + (address >> 8) + (address & 0xFF) + record_type + sum(data)
    return -total & 0xFF


def _checksum_offset(byte_count: int) -> int:
    """Character offset of the checksum field for a given byte count."""
    if byte_count == MAX_DATA_BYTES:
        return CHECKSUM_SLOT
    return DATA_OFFSET + 2 * byte_count


# =============================================================================
# Record
# =============================================================================

@dataclass(frozen=True)
class Record:
    """
    One decoded Intel HEX record.

    The checksum is not stored: it is a pure function of the other fields
    and is exposed through the checksum property.

    Attributes:
        record_type: Type of the record
        address: 16-bit address field
        data: Payload bytes (at most 16)

    Example:
        >>> record = Record(RecordType.DATA, 0x0100, bytes([0x01, 0x02]))
        >>> encode_record(record)
        ':020100000102FA'
    """
    record_type: RecordType
    address: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        if not 0 <= self.address <= 0xFFFF:
            raise RecordFormatError(f"record address 0x{self.address:X} exceeds 16 bits")
        if len(self.data) > MAX_DATA_BYTES:
            raise RecordFormatError(
                f"record payload of {len(self.data)} bytes exceeds {MAX_DATA_BYTES} bytes"
            )
        # Normalise bytearray/list payloads so records compare and hash by value
        object.__setattr__(self, "data", bytes(self.data))
        object.__setattr__(self, "record_type", RecordType(self.record_type))

    @property
    def byte_count(self) -> int:
        """Number of payload bytes."""
        return len(self.data)

    @property
    def checksum(self) -> int:
        """The checksum byte for this record."""
        return compute_checksum(self.byte_count, self.address, self.record_type, self.data)

    @classmethod
    def data_record(cls, address: int, data: bytes) -> "Record":
        """Create a DATA record."""
        return cls(RecordType.DATA, address, data)

    @classmethod
    def end_of_file(cls) -> "Record":
        """Create the END_OF_FILE record (always ':00000001FF')."""
        return cls(RecordType.END_OF_FILE)

    @classmethod
    def extended_linear_address(cls, upper: int) -> "Record":
        """Create an EXTENDED_LINEAR_ADDRESS record for the given upper 16 address bits."""
        return cls(RecordType.EXTENDED_LINEAR_ADDRESS, 0, upper.to_bytes(2, "big"))


# =============================================================================
# Codec
# =============================================================================

def _parse_hex(line: str, offset: int, width: int, line_number: Optional[int]) -> int:
    """Parse `width` hex digits of `line` starting at `offset`."""
    field = line[offset:offset + width]
    if len(field) != width:
        raise RecordFormatError("line too short", line_number, line)
    if not _HEX_FIELD.fullmatch(field):
        raise RecordFormatError(
            f"invalid hex digits '{field}' at column {offset + 1}", line_number, line
        )
    return int(field, 16)


def decode_line(line: str, line_number: Optional[int] = None) -> Record:
    """
    Decode one line of Intel HEX text into a Record.

    Trailing line terminators are ignored. The checksum field is read from
    the position given by the byte count and verified against the parsed
    fields.

    Args:
        line: The text of the line
        line_number: 1-based line number used in error messages

    Returns:
        The decoded record

    Raises:
        RecordFormatError: If the line is malformed
        ChecksumMismatchError: If the checksum does not verify

    Example:
        >>> decode_line(":00000001FF").record_type
        <RecordType.END_OF_FILE: 1>
    """
    line = line.rstrip("\r\n")

    if not line.startswith(START_CODE):
        raise RecordFormatError("line does not start with ':'", line_number, line)
    if len(line) < MIN_LINE_LENGTH:
        raise RecordFormatError("line too short", line_number, line)

    byte_count = _parse_hex(line, BYTE_COUNT_OFFSET, 2, line_number)
    if byte_count > MAX_DATA_BYTES:
        raise RecordFormatError(
            f"byte count {byte_count} exceeds {MAX_DATA_BYTES}", line_number, line
        )

    address = _parse_hex(line, ADDRESS_OFFSET, 4, line_number)
    type_code = _parse_hex(line, TYPE_OFFSET, 2, line_number)

    data = bytes(
        _parse_hex(line, DATA_OFFSET + 2 * i, 2, line_number)
        for i in range(byte_count)
    )

    checksum_offset = _checksum_offset(byte_count)
    actual = _parse_hex(line, checksum_offset, 2, line_number)
    if len(line) > checksum_offset + 2:
        raise RecordFormatError("unexpected characters after checksum", line_number, line)

    expected = compute_checksum(byte_count, address, type_code, data)
    if actual != expected:
        raise ChecksumMismatchError(expected, actual, line_number, line)

    try:
        record_type = RecordType(type_code)
    except ValueError:
        raise RecordFormatError(
            f"unknown record type 0x{type_code:02X}", line_number, line
        ) from None

    return Record(record_type, address, data)


def encode_record(record: Record) -> str:
    """
    Encode a record as one line of Intel HEX text (without a line terminator).

    All fields are zero-padded uppercase hexadecimal. The checksum is
    recomputed and placed with the same length-dependent rule used by
    decode_line().

    Example:
        >>> encode_record(Record.end_of_file())
        ':00000001FF'
    """
    chars = [
        START_CODE,
        f"{record.byte_count:02X}",
        f"{record.address:04X}",
        f"{record.record_type:02X}",
    ]
    chars.extend(f"{byte:02X}" for byte in record.data)

    line = "".join(chars)
    checksum_offset = _checksum_offset(record.byte_count)

    return f"{line[:checksum_offset]}{record.checksum:02X}"
