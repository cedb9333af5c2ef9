"""
hexcrc Error Hierarchy
======================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from HexCrcError, allowing callers to catch every
hexcrc-related error with a single except clause if desired.

Exception Hierarchy
-------------------
HexCrcError (base)
├── HexFormatError (malformed input)
│   ├── RecordFormatError - a line is not a valid Intel HEX record
│   │   └── ChecksumMismatchError - line checksum does not verify
│   └── EmptyImageError - no data to checksum
├── UnsupportedFeatureError - 20-bit segment addressing encountered
├── CapacityExceededError - image larger than the in-memory bound
├── FileExtensionError - input/output file is not a .hex file
└── ConfigError - unparsable fill or polynomial value

File access failures are reported with the builtin OSError family
(FileNotFoundError, PermissionError, ...) and are not wrapped.

Error messages follow this format:
    line 12: error: checksum mismatch (expected 0x4D, got 0x0C)
        :0200000048690C
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class HexCrcError(Exception):
    """
    Base exception for all hexcrc errors.

        try:
            hexfile = HexFile.from_file("firmware.hex")
        except HexCrcError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Format Exceptions
# =============================================================================

class HexFormatError(HexCrcError):
    """Base exception for malformed Intel HEX input."""
    pass


class RecordFormatError(HexFormatError):
    """
    A line could not be decoded as an Intel HEX record.

    Raised when a line:
    - Does not start with ':'
    - Is shorter than its byte count requires
    - Contains non-hexadecimal characters
    - Declares more than 16 payload bytes
    - Uses an unknown record type

    Attributes:
        message: The error description
        line_number: 1-based line number in the input (optional)
        line: The raw line text (optional)
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.message = message
        self.line_number = line_number
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.line_number is not None:
            parts.append(f"line {self.line_number}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.line is not None:
            parts.append(f"    {self.line}")

        return "\n".join(parts)


class ChecksumMismatchError(RecordFormatError):
    """
    The checksum byte of a record does not match its contents.

    The checksum of an Intel HEX record is the two's complement of the
    sum of all other bytes in the record. A mismatch means the line is
    corrupted and the whole run is aborted.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch (expected 0x{expected:02X}, got 0x{actual:02X})",
            line_number=line_number,
            line=line,
        )


class EmptyImageError(HexFormatError):
    """
    The assembled image has no room for a checksum.

    The CRC is stored in the last 4 bytes of the image, so an input
    without any data records cannot be checksummed.
    """
    pass


# =============================================================================
# Processing Exceptions
# =============================================================================

class UnsupportedFeatureError(HexCrcError):
    """
    The input uses an Intel HEX feature that is not supported.

    Only 16-bit and 32-bit (extended linear) addressing is handled.
    Extended segment address records (type 02) abort processing.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class CapacityExceededError(HexCrcError):
    """
    The assembled image would grow past its capacity.

    Attributes:
        capacity: The configured capacity in bytes
        requested: The length the image would have reached
    """

    def __init__(self, capacity: int, requested: int):
        self.capacity = capacity
        self.requested = requested
        super().__init__(
            f"image size {requested} bytes exceeds capacity of {capacity} bytes"
        )


class FileExtensionError(HexCrcError):
    """A file name carries an extension other than .hex."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"unsupported file extension for '{filename}', only .hex is supported"
        )


class ConfigError(HexCrcError):
    """
    A configuration value could not be parsed.

    The command-line tool recovers from this error by keeping the
    default value and printing a warning.
    """
    pass
