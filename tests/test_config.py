"""
Configuration Tests
===================

Tests for ChecksumConfig and numeric literal parsing.
"""

from dataclasses import FrozenInstanceError

import pytest

from hexcrc.config import (
    DEFAULT_CAPACITY,
    DEFAULT_FILL,
    DEFAULT_POLYNOMIAL,
    DEFAULT_SEED,
    ChecksumConfig,
    parse_number,
)
from hexcrc.errors import ConfigError


# =============================================================================
# ChecksumConfig Tests
# =============================================================================

class TestChecksumConfig:
    """Tests for the immutable checksum settings."""

    def test_defaults(self):
        config = ChecksumConfig()
        assert config.polynomial == DEFAULT_POLYNOMIAL == 0x04C11DB7
        assert config.seed == DEFAULT_SEED == 0xFFFFFFFF
        assert config.fill == DEFAULT_FILL == 0xFFFF
        assert config.capacity == DEFAULT_CAPACITY == 1048576

    def test_fill_byte_is_low_byte(self):
        assert ChecksumConfig().fill_byte == 0xFF
        assert ChecksumConfig(fill=0x1234).fill_byte == 0x34

    def test_frozen(self):
        config = ChecksumConfig()
        with pytest.raises(FrozenInstanceError):
            config.polynomial = 0

    def test_with_overrides(self):
        config = ChecksumConfig().with_overrides(polynomial=0x1EDC6F41, fill=0)
        assert config.polynomial == 0x1EDC6F41
        assert config.fill == 0

    def test_with_overrides_keeps_unset_values(self):
        config = ChecksumConfig(fill=0x00AA).with_overrides(polynomial=0x1)
        assert config.fill == 0x00AA

    @pytest.mark.parametrize("kwargs", [
        {"polynomial": 0x100000000},
        {"polynomial": -1},
        {"fill": 0x10000},
        {"seed": 0x100000000},
        {"capacity": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            ChecksumConfig(**kwargs)


# =============================================================================
# parse_number Tests
# =============================================================================

class TestParseNumber:
    """Tests for command-line numeric literals."""

    @pytest.mark.parametrize("text,expected", [
        ("0x04C11DB7", 0x04C11DB7),
        ("0X04c11db7", 0x04C11DB7),
        ("0xff", 0xFF),
        ("255", 255),
        ("0", 0),
        ("FFFF", 0xFFFF),
        ("04c11db7", 0x04C11DB7),
        ("  42  ", 42),
    ])
    def test_valid(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", [None, "", "   ", "zz", "0x", "12g", "-1", "0xFG"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            parse_number(text)

    def test_range_check(self):
        assert parse_number("0xFFFF", bits=16) == 0xFFFF
        with pytest.raises(ConfigError, match="16 bits"):
            parse_number("0x10000", bits=16)
        with pytest.raises(ConfigError, match="32 bits"):
            parse_number("4294967296", bits=32)
