"""
hexcrc - Intel HEX CRC-32 Command-Line Interface
================================================

Computes the CRC-32 of a firmware image stored as Intel HEX and, with -w,
rewrites the file with the checksum placed in the image's last 4 bytes.

Usage Examples
--------------
Print the CRC of a file (".hex" is appended when no extension is given):
    $ hexcrc -i firmware
    CRC = 0x7BDD04C7
    Done

Patch the CRC into a copy of the file:
    $ hexcrc -i firmware.hex -w -o firmware_crc.hex

Use a different polynomial and fill value:
    $ hexcrc -i firmware -w -p 0x1EDC6F41 -f 0x00

Exit Codes
----------
     0  success
    -1  no parameters / flag without value
    -2  file extension error
    -3  unknown flag
    -4  no input file
    -5  line checksum or format error
    -6  unsupported feature (20-bit segment addressing)
    -7  file open error
    -8  image exceeds 1 MiB
"""

import sys
from pathlib import Path
from typing import Optional
import logging

import click

from hexcrc import __version__
from hexcrc.cli.errors import ExitCode, handle_cli_exception
from hexcrc.config import ChecksumConfig, parse_number
from hexcrc.errors import ConfigError
from hexcrc.ihex import HexFile, resolve_hex_path

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# Command Class
# =============================================================================

class HexCrcCommand(click.Command):
    """
    Click command reporting argument errors with hexcrc's exit codes.

    Click would exit with status 2 for every usage error; hexcrc keeps
    distinct codes for a missing argument list, an unknown flag and a flag
    without its value.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args:
            click.echo("No parameters", err=True)
            ctx.exit(ExitCode.NO_PARAMETERS)

        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption as e:
            click.echo(f"Unknown flag {e.option_name}", err=True)
            ctx.exit(ExitCode.UNKNOWN_FLAG)
        except click.BadOptionUsage as e:
            click.echo(f"Error: {e.format_message()}", err=True)
            ctx.exit(ExitCode.NO_PARAMETERS)


# =============================================================================
# Configuration Helpers
# =============================================================================

def build_config(fill: Optional[str], polynomial: Optional[str]) -> ChecksumConfig:
    """
    Build the checksum configuration from -f / -p values.

    Invalid values are reported and the defaults are kept.
    """
    config = ChecksumConfig()

    if fill is not None:
        try:
            config = config.with_overrides(fill=parse_number(fill, bits=16))
            click.echo(f"Using custom fill value: 0x{config.fill:X}")
        except ConfigError as e:
            logger.warning(f"{e}; keeping default fill value 0x{config.fill:X}")

    if polynomial is not None:
        try:
            config = config.with_overrides(polynomial=parse_number(polynomial, bits=32))
            click.echo(f"Using custom polynomial: 0x{config.polynomial:X}")
        except ConfigError as e:
            logger.warning(f"{e}; keeping default polynomial 0x{config.polynomial:X}")

    return config


# =============================================================================
# Main Command
# =============================================================================

@click.command(cls=HexCrcCommand, context_settings=CONTEXT_SETTINGS)
@click.option(
    "-i", "input_name",
    metavar="<name>",
    help="Input file name (interpreted as .hex if extension omitted)",
)
@click.option(
    "-o", "output_name",
    metavar="<name>",
    help="Output file name; if not specified, input file is over-written (only with -w)",
)
@click.option(
    "-w", "write",
    is_flag=True,
    help="Write calculated CRC to the last 4 bytes of data",
)
@click.option(
    "-f", "fill",
    metavar="<fill>",
    help="Fill empty spaces with value <fill> (default 0xFFFF)",
)
@click.option(
    "-p", "polynomial",
    metavar="<poly>",
    help="Custom polynomial (default 0x04C11DB7)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.argument("extra", nargs=-1)
@click.version_option(__version__, "--version", "-V", prog_name="hexcrc")
def main(
    input_name: Optional[str],
    output_name: Optional[str],
    write: bool,
    fill: Optional[str],
    polynomial: Optional[str],
    verbose: bool,
    extra: tuple[str, ...],
) -> None:
    """
    Calculate the CRC-32 of an Intel HEX firmware image.

    The image is rebuilt from the file's records, gaps are filled, the
    length is aligned to 4 bytes and the CRC is calculated over all but
    the last 4 bytes, which receive the checksum.

    \b
    Examples:
      hexcrc -i firmware
      hexcrc -i firmware.hex -w -o firmware_crc.hex
      hexcrc -i firmware -w -p 0x1EDC6F41 -f 0
    """
    setup_logging(verbose)

    for value in extra:
        logger.warning(f"Extra parameter {value}")

    if input_name is None:
        click.echo("Input file not specified", err=True)
        sys.exit(ExitCode.NO_INPUT_FILE)

    try:
        input_path = resolve_hex_path(input_name)
        output_path: Path = resolve_hex_path(output_name) if output_name else input_path
        config = build_config(fill, polynomial)

        hexfile = HexFile.from_file(input_path, config)
        click.echo(f"CRC = 0x{hexfile.crc:08X}")

        if write:
            hexfile.write(output_path)
            if verbose:
                click.echo(f"Wrote {output_path}")

        click.echo("Done")

    except Exception as e:
        handle_cli_exception(e, verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
