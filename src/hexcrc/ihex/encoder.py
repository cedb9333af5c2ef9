"""
Intel HEX Image Encoder
=======================

Turns a finished FirmwareImage back into Intel HEX records.

Output Layout
-------------
    :02000004HHHHCC          extended linear address (upper 16 bits)
    :10LLLL00DD...DDCC       data, 16 bytes per record
    ...
    :02000004HHHHCC          emitted again whenever a record starts under
    ...                      different upper 16 bits
    :00000001FF              end of file

An image of N bytes gives ceil(N/16) data records. A record may run across
a 64 KiB boundary; its bytes continue at the following linear addresses.
Linear addresses wrap modulo 4 GiB.
"""

from typing import Final, Iterator, Optional
import logging

from hexcrc.ihex.assembler import FirmwareImage
from hexcrc.ihex.records import MAX_DATA_BYTES, Record, encode_record

logger = logging.getLogger(__name__)

# Linear addresses are 32 bits wide
ADDRESS_MASK: Final[int] = 0xFFFFFFFF


def iter_image_records(image: FirmwareImage) -> Iterator[Record]:
    """
    Yield the records describing an image, in output order.

    Args:
        image: The image to encode

    Yields:
        Extended linear address, data, and end-of-file records
    """
    data = image.data
    extension: Optional[int] = None

    for offset in range(0, len(data), MAX_DATA_BYTES):
        address = (image.first_address + offset) & ADDRESS_MASK

        if address >> 16 != extension:
            extension = address >> 16
            yield Record.extended_linear_address(extension)

        yield Record.data_record(address & 0xFFFF, data[offset:offset + MAX_DATA_BYTES])

    yield Record.end_of_file()


def encode_image(image: FirmwareImage) -> list[Record]:
    """Encode an image as a list of records."""
    return list(iter_image_records(image))


def render_image(image: FirmwareImage) -> list[str]:
    """
    Encode an image as Intel HEX lines (without line terminators).

    Example:
        >>> image = FirmwareImage(first_address=0, data=bytearray(b"\\xff" * 4))
        >>> render_image(image)
        [':020000040000FA', ':04000000FFFFFFFF00', ':00000001FF']
    """
    lines = [encode_record(record) for record in iter_image_records(image)]
    logger.debug(f"Encoded {len(image)} bytes as {len(lines)} records")
    return lines
