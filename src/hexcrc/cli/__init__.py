"""
hexcrc Command-Line Interface
=============================

This package provides the `hexcrc` command-line tool, which computes the
CRC-32 of an Intel HEX firmware image and optionally writes the image back
with the checksum stored in its last 4 bytes.

The tool is implemented as a Click application with stable exit codes
(see hexcrc.cli.errors.ExitCode).
"""

__all__ = ["hexcrc"]
