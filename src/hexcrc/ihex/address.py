"""
Intel HEX Address Tracking
==========================

Data records only carry the low 16 bits of their address. The upper bits
come from the most recent extended linear address record (type 04). This
module keeps the running address state while records are consumed.

    linear address = (extension << 16) | base

Two snapshots are kept:
- **current**: updated by every data and extended linear address record
- **first**: base and extension latched by the first record of each kind,
  used as the origin (offset 0) of the assembled image

Record Handling
---------------
| Type                       | Effect                                   |
|----------------------------|------------------------------------------|
| 00 Data                    | base = record address, bytes are stored  |
| 01 End of file             | stop consuming records                   |
| 02 Extended segment addr.  | UnsupportedFeatureError                  |
| 03 / 05 Start address      | ignored                                  |
| 04 Extended linear addr.   | extension = payload (big-endian)         |
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from hexcrc.errors import RecordFormatError, UnsupportedFeatureError
from hexcrc.ihex.records import Record, RecordType

logger = logging.getLogger(__name__)


# =============================================================================
# Linear Address
# =============================================================================

@dataclass(frozen=True, order=True)
class LinearAddress:
    """
    A 32-bit linear address.

    Attributes:
        value: The full 32-bit address

    Example:
        >>> address = LinearAddress.from_parts(0x0800, 0x1234)
        >>> f"0x{address.value:08X}"
        '0x08001234'
        >>> f"0x{address.extension:04X}"
        '0x0800'
    """
    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ValueError(f"Linear address 0x{self.value:X} exceeds 32 bits")

    @classmethod
    def from_parts(cls, extension: int, base: int) -> "LinearAddress":
        """Combine an upper 16-bit extension and a lower 16-bit base."""
        return cls(((extension & 0xFFFF) << 16) | (base & 0xFFFF))

    @property
    def base(self) -> int:
        """Low 16 bits (the address field of a data record)."""
        return self.value & 0xFFFF

    @property
    def extension(self) -> int:
        """High 16 bits (the payload of an extended linear address record)."""
        return (self.value >> 16) & 0xFFFF

    def __str__(self) -> str:
        return f"0x{self.value:08X}"


# =============================================================================
# Tracker
# =============================================================================

class TrackerAction(Enum):
    """What the consumer should do with a record after tracking it."""
    STORE = "store"     # Data record: append its payload at the current address
    SKIP = "skip"       # Control record: nothing to store
    STOP = "stop"       # End of file: no further records are consumed


class AddressTracker:
    """
    Running address state over a stream of records.

    Example:
        >>> tracker = AddressTracker()
        >>> tracker.feed(Record.extended_linear_address(0x0800))
        <TrackerAction.SKIP: 'skip'>
        >>> tracker.feed(Record.data_record(0x0010, b"\\x01"))
        <TrackerAction.STORE: 'store'>
        >>> str(tracker.current)
        '0x08000010'
    """

    def __init__(self) -> None:
        self.base: int = 0
        self.extension: int = 0
        self.first_base: Optional[int] = None
        self.first_extension: Optional[int] = None
        self.finished: bool = False

    @property
    def current(self) -> LinearAddress:
        """The linear address of the most recent data record."""
        return LinearAddress.from_parts(self.extension, self.base)

    @property
    def first(self) -> LinearAddress:
        """The image origin built from the latched base and extension."""
        return LinearAddress.from_parts(self.first_extension or 0, self.first_base or 0)

    def feed(self, record: Record, line_number: Optional[int] = None) -> TrackerAction:
        """
        Update the address state from one record.

        Args:
            record: The decoded record
            line_number: 1-based line number used in error messages

        Returns:
            The action the consumer should take for this record

        Raises:
            UnsupportedFeatureError: For extended segment address records
            RecordFormatError: For a malformed extended linear address record
        """
        record_type = record.record_type

        if record_type == RecordType.DATA:
            self.base = record.address
            if self.first_base is None:
                self.first_base = record.address
            return TrackerAction.STORE

        elif record_type == RecordType.END_OF_FILE:
            self.finished = True
            return TrackerAction.STOP

        elif record_type == RecordType.EXTENDED_SEGMENT_ADDRESS:
            raise UnsupportedFeatureError(
                "20-bit segment addressing is not supported", line_number
            )

        elif record_type in (RecordType.START_SEGMENT_ADDRESS,
                             RecordType.START_LINEAR_ADDRESS):
            logger.debug(f"Skipping {record_type.get_description()} record")
            return TrackerAction.SKIP

        elif record_type == RecordType.EXTENDED_LINEAR_ADDRESS:
            if record.byte_count != 2:
                raise RecordFormatError(
                    f"extended linear address record needs 2 data bytes, "
                    f"got {record.byte_count}",
                    line_number,
                )
            self.extension = int.from_bytes(record.data, "big")
            if self.first_extension is None:
                self.first_extension = self.extension
            logger.debug(f"Extended linear address 0x{self.extension:04X}")
            return TrackerAction.SKIP

        raise AssertionError(f"unhandled record type {record_type!r}")
