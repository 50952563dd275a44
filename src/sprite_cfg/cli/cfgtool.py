"""
cfgtool - Sprite CFG Command-Line Interface
===========================================

This module implements the command-line interface for reading, checking
and converting custom sprite CFG records.

Usage Examples
--------------
Show a record:
    $ cfgtool show thwomp.cfg
    $ cfgtool show thwomp.json --format fields

Show a vanilla sprite straight from a ROM:
    $ cfgtool show smw.smc --slot 0x26

Convert between formats:
    $ cfgtool export thwomp.cfg -o thwomp.json

Copy tweaker bytes out of and into a ROM:
    $ cfgtool export smw.smc --slot 0x26 -o thwomp.cfg
    $ cfgtool import thwomp.cfg smw.smc --slot 0x26

Slots are vanilla sprite numbers, written in decimal or with a 0x prefix.
Use 'cfgtool slots' to list them.

Exit Codes
----------
0 - Success
1 - Malformed or invalid CFG data
2 - Invalid arguments or missing files
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from sprite_cfg import __version__
from sprite_cfg.cli.errors import handle_cli_exception
from sprite_cfg.codec import (
    VANILLA_SPRITE_NAMES,
    SnesPointer,
    TableEntry,
    to_json,
    to_text,
)
from sprite_cfg.files import FileType, load_file, save_file
from sprite_cfg.model import REGISTER_ADDRESSES, REGISTER_NAMES, fields_of, validate_before_save

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the verbosity flag.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


class NumberType(click.ParamType):
    """Integer written in decimal or with a 0x/0o/0b prefix."""

    name = "number"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return int(value, 0)
        except ValueError:
            self.fail(f"{value!r} is not a number (use e.g. 38 or 0x26)", param, ctx)


NUMBER = NumberType()

slot_option = click.option(
    "-s", "--slot",
    type=NUMBER,
    default=None,
    help="Vanilla sprite slot for ROM files (default: SPRITE_CFG_SLOT or 0)",
)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="cfgtool")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Read, check and convert custom sprite CFG files.

    FILE arguments may be .cfg text, .json or an SMW ROM (.smc/.sfc).
    ROM files hold only the six tweaker bytes of each vanilla sprite.
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Show Command
# =============================================================================

def _format_fields(record) -> list[str]:
    lines = [
        f"Type:               {record.type:02X}"
        + (f" ({record.sprite_type.get_description()})" if record.sprite_type is not None else ""),
        f"Acts like:          {record.act_like:02X}",
    ]
    for name in REGISTER_NAMES:
        value = record.get_register(name)
        lines.append(f"${REGISTER_ADDRESSES[name]:04X}:              {value:02X}")
        for spec in fields_of(name):
            field_value = getattr(record, spec.name)
            shown = ("yes" if field_value else "no") if spec.is_flag else str(field_value)
            lines.append(f"  {spec.name:<30} {shown}")
    lines += [
        f"Extra properties:   {record.extra_property_1:02X} {record.extra_property_2:02X}",
        f"Extra byte counts:  {record.byte_count}:{record.extra_byte_count}",
        f"ASM file:           {record.asm_file}",
        f"Display entries:    {len(record.display_entries)}",
        f"Collection entries: {len(record.collection_entries)}",
        f"Map16 bytes:        {record.map16.significant_length}",
    ]
    return lines


@main.command("show")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@slot_option
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(["text", "json", "fields"]),
    default="text",
    help="Output format (default: text)",
)
@pass_context
def cmd_show(ctx: Context, file: Path, slot: Optional[int], output_format: str) -> None:
    """
    Print the record stored in FILE.

    \b
    Example:
      cfgtool show thwomp.cfg
      cfgtool show smw.smc --slot 0x26 --format fields
    """
    try:
        record = load_file(file, slot).record
        if output_format == "text":
            click.echo(to_text(record, newline="\n"), nl=False)
        elif output_format == "json":
            click.echo(to_json(record))
        else:
            for line in _format_fields(record):
                click.echo(line)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@slot_option
@pass_context
def cmd_validate(ctx: Context, file: Path, slot: Optional[int]) -> None:
    """
    Check that FILE parses and would be accepted by a save.

    \b
    Example:
      cfgtool validate thwomp.json
    """
    try:
        loaded = load_file(file, slot)
        validate_before_save(loaded.record)
        click.echo(f"{file}: OK")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Validation")


# =============================================================================
# Slots Command
# =============================================================================

@main.command("slots")
@click.option(
    "--search",
    type=str,
    default=None,
    help="Only list slots whose name contains TEXT (case-insensitive)",
)
def cmd_slots(search: Optional[str]) -> None:
    """
    List the vanilla sprite slots a ROM holds.

    \b
    Example:
      cfgtool slots --search koopa
    """
    shown = 0
    for slot, name in enumerate(VANILLA_SPRITE_NAMES):
        if search and search.lower() not in name.lower():
            continue
        click.echo(f"0x{slot:02X}  {name}")
        shown += 1
    if search and not shown:
        click.echo(f"No slot matches '{search}'.")


# =============================================================================
# Export / Import Commands
# =============================================================================

@main.command("export")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output .cfg or .json file",
)
@slot_option
@pass_context
def cmd_export(ctx: Context, source: Path, output: Path, slot: Optional[int]) -> None:
    """
    Write the record in SOURCE to a .cfg or .json file.

    SOURCE may be a ROM, in which case --slot selects the sprite.

    \b
    Example:
      cfgtool export smw.smc --slot 0x26 -o thwomp.cfg
      cfgtool export thwomp.cfg -o thwomp.json
    """
    try:
        if FileType.from_path(output) == FileType.ROM:
            raise click.BadParameter("use 'cfgtool import' to write into a ROM", param_hint="--output")
        loaded = load_file(source, slot)
        save_file(loaded.record, output)
        if loaded.slot is not None:
            click.echo(f"Exported slot 0x{loaded.slot:02X} to {output}")
        else:
            click.echo(f"Exported {source} to {output}")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


@main.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("rom", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@slot_option
@pass_context
def cmd_import(ctx: Context, source: Path, rom: Path, slot: Optional[int]) -> None:
    """
    Patch the tweaker bytes of SOURCE into a vanilla slot of ROM.

    Only the six tweaker bytes of the slot are changed.

    \b
    Example:
      cfgtool import thwomp.cfg smw.smc --slot 0x26
    """
    try:
        if FileType.from_path(rom) != FileType.ROM:
            raise click.BadParameter(f"{rom} is not a .smc or .sfc file", param_hint="ROM")
        record = load_file(source).record
        save_file(record, rom, slot)
        click.echo(f"Patched {rom}")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Table Command
# =============================================================================

@main.command("table")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@slot_option
@click.option("--init", "init_address", type=NUMBER, default=None, help="INIT routine SNES address")
@click.option("--main", "main_address", type=NUMBER, default=None, help="MAIN routine SNES address")
@pass_context
def cmd_table(
    ctx: Context,
    file: Path,
    slot: Optional[int],
    init_address: Optional[int],
    main_address: Optional[int],
) -> None:
    """
    Print the 16-byte sprite table entry for the record in FILE.

    Routines without an address point at the empty routine.

    \b
    Example:
      cfgtool table thwomp.cfg --init 0x108000 --main 0x108010
    """
    try:
        init = SnesPointer() if init_address is None else SnesPointer(init_address)
        main_ptr = SnesPointer() if main_address is None else SnesPointer(main_address)
        entry = TableEntry.from_record(load_file(file, slot).record, init, main_ptr)
        click.echo(" ".join(f"{byte:02X}" for byte in entry.to_bytes()))
        if ctx.verbose:
            click.echo(f"INIT: {entry.init}  MAIN: {entry.main}")
    except ValueError as e:
        handle_cli_exception(click.BadParameter(str(e)), verbose=ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


if __name__ == "__main__":
    main()
