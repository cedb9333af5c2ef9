"""
hexcrc Configuration
====================

Checksum and image settings shared by the assembler and the CRC engine.

The configuration is an immutable value created once per run and passed
explicitly to the components that need it:

    >>> config = ChecksumConfig(polynomial=0x1EDC6F41)
    >>> assembler = ImageAssembler(config)

Command-line values for the fill byte and the polynomial are parsed with
parse_number(), which accepts decimal and 0x-prefixed hexadecimal literals.
"""

from dataclasses import dataclass, replace
from typing import Final, Optional
import re

from hexcrc.errors import ConfigError


# =============================================================================
# Defaults
# =============================================================================

# CRC-32 polynomial (MPEG-2 / STM32 hardware CRC unit)
DEFAULT_POLYNOMIAL: Final[int] = 0x04C11DB7

# CRC accumulator seed
DEFAULT_SEED: Final[int] = 0xFFFFFFFF

# Fill value for gaps and alignment padding; only the low byte is used
DEFAULT_FILL: Final[int] = 0xFFFF

# Maximum size of the assembled image (1 MiB)
DEFAULT_CAPACITY: Final[int] = 1024 * 1024

_HEX_PREFIX = re.compile(r"^0[xX]([0-9A-Fa-f]+)$")
_DECIMAL = re.compile(r"^[0-9]+$")
_BARE_HEX = re.compile(r"^[0-9A-Fa-f]+$")


@dataclass(frozen=True)
class ChecksumConfig:
    """
    Settings for image assembly and CRC calculation.

    Attributes:
        polynomial: CRC-32 generator polynomial (normal, MSB-first form)
        fill: Fill value for gaps and padding (16-bit, low byte is used)
        seed: Initial CRC accumulator value
        capacity: Maximum assembled image size in bytes
    """
    polynomial: int = DEFAULT_POLYNOMIAL
    fill: int = DEFAULT_FILL
    seed: int = DEFAULT_SEED
    capacity: int = DEFAULT_CAPACITY

    def __post_init__(self) -> None:
        if not 0 <= self.polynomial <= 0xFFFFFFFF:
            raise ConfigError(f"Polynomial 0x{self.polynomial:X} does not fit in 32 bits")
        if not 0 <= self.seed <= 0xFFFFFFFF:
            raise ConfigError(f"Seed 0x{self.seed:X} does not fit in 32 bits")
        if not 0 <= self.fill <= 0xFFFF:
            raise ConfigError(f"Fill value 0x{self.fill:X} does not fit in 16 bits")
        if self.capacity <= 0:
            raise ConfigError(f"Capacity must be positive, got {self.capacity}")

    @property
    def fill_byte(self) -> int:
        """The byte written into gaps and alignment padding."""
        return self.fill & 0xFF

    def with_overrides(
        self,
        polynomial: Optional[int] = None,
        fill: Optional[int] = None,
    ) -> "ChecksumConfig":
        """Return a copy with the given values replaced (None keeps the current one)."""
        changes = {}
        if polynomial is not None:
            changes["polynomial"] = polynomial
        if fill is not None:
            changes["fill"] = fill
        return replace(self, **changes)


# =============================================================================
# Numeric Literal Parsing
# =============================================================================

def parse_number(text: Optional[str], bits: int = 32) -> int:
    """
    Parse a numeric command-line literal.

    Accepted forms:
    - 0x-prefixed hexadecimal: "0x04C11DB7", "0XFF"
    - Plain decimal: "255"
    - Bare hexadecimal containing at least one letter: "FFFF", "04c11db7"

    Args:
        text: The literal to parse
        bits: Width of the target value; larger values are rejected

    Returns:
        The parsed value

    Raises:
        ConfigError: If the text is empty, malformed, or out of range

    Example:
        >>> parse_number("0x04C11DB7")
        79764919
        >>> parse_number("255", bits=16)
        255
    """
    if text is None or not text.strip():
        raise ConfigError("Parameter not valid or not specified")

    text = text.strip()

    if match := _HEX_PREFIX.match(text):
        value = int(match.group(1), 16)
    elif _DECIMAL.match(text):
        value = int(text, 10)
    elif _BARE_HEX.match(text):
        value = int(text, 16)
    else:
        raise ConfigError(f"Parameter not valid: '{text}'")

    if value >= 1 << bits:
        raise ConfigError(f"Value '{text}' does not fit in {bits} bits")

    return value
