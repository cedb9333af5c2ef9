"""
Firmware Image Assembly
=======================

This module rebuilds a contiguous memory image from the scattered data
records of an Intel HEX file.

Image Layout
------------
Offset 0 of the image corresponds to the first address seen in the file
(see AddressTracker.first). Each data record is placed at

    offset = linear address - first address

Holes between records are filled with the configured fill byte. After the
last record the image is padded to a multiple of 4 bytes, since the CRC is
computed over 32-bit words and the last word holds the checksum.

    +-------------+-------+-------------+---------+----------+
    | record data | gap   | record data | padding | CRC slot |
    +-------------+-------+-------------+---------+----------+
    0                                              len-4      len

The image only ever grows: a record that starts before the current end of
the image (overlapping or out-of-order input) is appended at the end and a
warning is logged.

Usage
-----
    >>> assembler = ImageAssembler()
    >>> image = assembler.assemble([":0200000048694D", ":00000001FF"])
    >>> image.data.hex()
    '4869ffff'
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional
import logging

from hexcrc.config import ChecksumConfig, DEFAULT_CAPACITY
from hexcrc.errors import CapacityExceededError
from hexcrc.ihex.address import AddressTracker, TrackerAction
from hexcrc.ihex.records import Record, decode_line

logger = logging.getLogger(__name__)

# CRC word size; the image length is aligned to this
WORD_SIZE = 4


# =============================================================================
# Firmware Image
# =============================================================================

@dataclass
class FirmwareImage:
    """
    A contiguous, bounded memory image.

    Attributes:
        first_address: Linear address of offset 0
        data: Image contents
        capacity: Maximum length in bytes
    """
    first_address: int = 0
    data: bytearray = field(default_factory=bytearray)
    capacity: int = DEFAULT_CAPACITY

    def __len__(self) -> int:
        return len(self.data)

    @property
    def end_address(self) -> int:
        """Linear address one past the last byte of the image."""
        return self.first_address + len(self.data)

    def _reserve(self, count: int) -> None:
        requested = len(self.data) + count
        if requested > self.capacity:
            raise CapacityExceededError(self.capacity, requested)

    def append(self, payload: bytes) -> None:
        """Append bytes at the end of the image."""
        self._reserve(len(payload))
        self.data.extend(payload)

    def fill_to(self, length: int, fill_byte: int) -> int:
        """
        Grow the image to `length` bytes with `fill_byte`.

        Returns:
            The number of bytes added (0 if the image is already long enough)
        """
        count = length - len(self.data)
        if count <= 0:
            return 0
        self._reserve(count)
        self.data.extend(bytes([fill_byte]) * count)
        return count

    def align(self, fill_byte: int, boundary: int = WORD_SIZE) -> int:
        """Pad the image to a multiple of `boundary`; returns the padding added."""
        remainder = len(self.data) % boundary
        if remainder == 0:
            return 0
        return self.fill_to(len(self.data) + boundary - remainder, fill_byte)

    @property
    def checksum_slot(self) -> bytes:
        """The last 4 bytes of the image, where the CRC is stored."""
        return bytes(self.data[-WORD_SIZE:])

    @property
    def body(self) -> bytes:
        """The image without its checksum slot (the CRC input)."""
        return bytes(self.data[:-WORD_SIZE])

    def to_bytes(self) -> bytes:
        return bytes(self.data)


# =============================================================================
# Assembler
# =============================================================================

class ImageAssembler:
    """
    Builds a FirmwareImage from Intel HEX records.

    Records can be pushed one at a time with feed() followed by finish(),
    or a whole file can be processed with assemble().

    Attributes:
        config: Fill byte and capacity settings
        tracker: Address state for the records fed so far
        image: The image being built
    """

    def __init__(self, config: Optional[ChecksumConfig] = None) -> None:
        self.config = config or ChecksumConfig()
        self.tracker = AddressTracker()
        self.image = FirmwareImage(capacity=self.config.capacity)
        self.gaps_filled = 0

    @property
    def finished(self) -> bool:
        """True once the end-of-file record has been seen."""
        return self.tracker.finished

    def feed(self, record: Record, line_number: Optional[int] = None) -> TrackerAction:
        """
        Consume one record.

        Args:
            record: The decoded record
            line_number: 1-based line number used in error messages

        Returns:
            The tracker's action for the record

        Raises:
            UnsupportedFeatureError: For extended segment address records
            CapacityExceededError: If the image would exceed its capacity
        """
        action = self.tracker.feed(record, line_number)
        if action != TrackerAction.STORE:
            return action

        first = self.tracker.first
        current = self.tracker.current
        self.image.first_address = first.value
        target = current.value - first.value

        if self.image.fill_to(target, self.config.fill_byte):
            self.gaps_filled += 1
            logger.info("Filled gap")
            logger.debug(f"Gap filled up to {current}")
        elif target < len(self.image):
            logger.warning(
                f"Record at {current} overlaps image data ending at "
                f"0x{self.image.end_address:08X}; appending at offset "
                f"0x{len(self.image):X}"
            )

        self.image.append(record.data)
        return action

    def finish(self) -> FirmwareImage:
        """
        Complete the image by padding it to a multiple of 4 bytes.

        Returns:
            The assembled image
        """
        if self.image.align(self.config.fill_byte):
            logger.info("Aligned")
        logger.debug(
            f"Image assembled: {len(self.image)} bytes from "
            f"0x{self.image.first_address:08X}"
        )
        return self.image

    def assemble(self, lines: Iterable[str]) -> FirmwareImage:
        """
        Decode and assemble a sequence of Intel HEX lines.

        Decoding stops at the end-of-file record; later lines are not read.

        Args:
            lines: Lines of Intel HEX text (terminators are ignored)

        Returns:
            The assembled, 4-byte aligned image

        Raises:
            RecordFormatError: If a line is malformed or its checksum is wrong
            UnsupportedFeatureError: For extended segment address records
            CapacityExceededError: If the image would exceed its capacity
        """
        for line_number, line in enumerate(lines, start=1):
            record = decode_line(line, line_number)
            if self.feed(record, line_number) == TrackerAction.STOP:
                break

        if not self.finished:
            logger.warning("No end-of-file record found")

        return self.finish()


def assemble_image(lines: Iterable[str], config: Optional[ChecksumConfig] = None) -> FirmwareImage:
    """
    Assemble an image from Intel HEX lines.

    Convenience wrapper around ImageAssembler.assemble().
    """
    return ImageAssembler(config).assemble(lines)
