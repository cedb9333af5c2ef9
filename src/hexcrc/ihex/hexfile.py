"""
Intel HEX File Processing
=========================

High-level interface tying the pipeline together:

    read lines -> decode -> assemble image -> CRC -> (re-encode -> write)

    >>> hexfile = HexFile.from_file("firmware.hex")
    >>> print(f"CRC = 0x{hexfile.crc:08X}")
    >>> hexfile.write("firmware_crc.hex")

The image held by a HexFile already carries the CRC in its last 4 bytes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union
import logging

from hexcrc.config import ChecksumConfig
from hexcrc.errors import FileExtensionError
from hexcrc.ihex.assembler import FirmwareImage, ImageAssembler
from hexcrc.ihex.crc32 import patch_image_crc
from hexcrc.ihex.encoder import render_image

logger = logging.getLogger(__name__)

HEX_EXTENSION = ".hex"


def resolve_hex_path(name: Union[str, Path]) -> Path:
    """
    Apply the .hex extension rule to a file name.

    A name without an extension gets ".hex" appended. Any extension other
    than ".hex" (case-insensitive) is rejected.

    Raises:
        FileExtensionError: If the name has a different extension

    Example:
        >>> resolve_hex_path("firmware")
        PosixPath('firmware.hex')
    """
    path = Path(name)
    if not path.suffix:
        return path.with_name(path.name + HEX_EXTENSION)
    if path.suffix.lower() != HEX_EXTENSION:
        raise FileExtensionError(str(name))
    return path


@dataclass
class HexFile:
    """
    An Intel HEX firmware image with its CRC applied.

    Attributes:
        image: The assembled image, checksum patched into the last 4 bytes
        crc: The display CRC value
        config: Settings used to assemble and checksum the image
        source: The file the image was read from (None for in-memory input)
    """
    image: FirmwareImage
    crc: int
    config: ChecksumConfig = field(default_factory=ChecksumConfig)
    source: Optional[Path] = None

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        config: Optional[ChecksumConfig] = None,
        source: Optional[Path] = None,
    ) -> "HexFile":
        """
        Assemble and checksum Intel HEX text.

        Args:
            lines: Lines of Intel HEX text
            config: Assembly and CRC settings

        Returns:
            A HexFile with the CRC patched into its image

        Raises:
            RecordFormatError: If a line is malformed or its checksum is wrong
            UnsupportedFeatureError: For extended segment address records
            CapacityExceededError: If the image would exceed its capacity
            EmptyImageError: If the input contains no data
        """
        config = config or ChecksumConfig()
        image = ImageAssembler(config).assemble(lines)
        crc = patch_image_crc(image, config)
        return cls(image=image, crc=crc, config=config, source=source)

    @classmethod
    def from_text(cls, text: str, config: Optional[ChecksumConfig] = None) -> "HexFile":
        """Assemble and checksum Intel HEX text held in a string."""
        return cls.from_lines(text.splitlines(), config)

    @classmethod
    def from_file(
        cls,
        filepath: Union[str, Path],
        config: Optional[ChecksumConfig] = None,
    ) -> "HexFile":
        """
        Read, assemble and checksum an Intel HEX file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            OSError: If the file cannot be read
        """
        filepath = Path(filepath)
        logger.debug(f"Reading {filepath}")
        with filepath.open("r", encoding="ascii", errors="replace") as handle:
            return cls.from_lines(handle, config, source=filepath)

    def to_lines(self) -> list[str]:
        """Re-encode the image as Intel HEX lines (without terminators)."""
        return render_image(self.image)

    def to_text(self) -> str:
        """Re-encode the image as Intel HEX text, one record per line."""
        return "".join(f"{line}\n" for line in self.to_lines())

    def write(self, filepath: Union[str, Path, None] = None) -> Path:
        """
        Write the image as Intel HEX.

        Args:
            filepath: Output path; defaults to the source file

        Returns:
            The path written

        Raises:
            ValueError: If no path is given and the image has no source file
            OSError: If the file cannot be written
        """
        if filepath is None:
            if self.source is None:
                raise ValueError("No output path given and no source file to overwrite")
            filepath = self.source
        filepath = Path(filepath)

        text = self.to_text()
        with filepath.open("w", encoding="ascii", newline="\n") as handle:
            handle.write(text)

        logger.debug(f"Wrote {len(self.image)} bytes to {filepath}")
        return filepath
