"""
c8disasm - CHIP-8 Disassembler Command-Line Interface
=====================================================

Usage Examples
--------------
Disassemble a ROM (base address 0x200):
    $ c8disasm pong.ch8

Limit number of instructions:
    $ c8disasm pong.ch8 --count 20

Output to file:
    $ c8disasm pong.ch8 -o pong.lst

Hex dump with disassembly:
    $ c8disasm pong.ch8 --hex
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.context import Context, pass_context
from chip8_vm.cli.errors import ExitCode, handle_cli_exception, parse_address
from chip8_vm.disassembler import Chip8Disassembler


def hex_dump(data: bytes, base_address: int) -> list[str]:
    """Format data as commented hex dump lines, 16 bytes per line."""
    lines = ["; Hex dump:", "; " + "-" * 60]
    for i in range(0, len(data), 16):
        chunk = data[i:i + 16]
        hex_str = " ".join(f"{b:02X}" for b in chunk)
        lines.append(f"; ${base_address + i:03X}: {hex_str}")
    lines.append("; " + "-" * 60)
    lines.append("")
    return lines


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0x200",
    help="Load address (hex with 0x or $ prefix, or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Include hex dump before disassembly",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8disasm")
@pass_context
def main(
    ctx: Context,
    input_file: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    show_hex: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 ROM.

    INPUT_FILE is the ROM image to disassemble.
    """
    ctx.verbose = verbose
    ctx.setup_logging()

    try:
        base_address = parse_address(address)
        data = input_file.read_bytes()
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    if not data:
        click.echo(f"Error: {input_file} is empty", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if verbose:
        click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
        click.echo(f"Base address: ${base_address:03X}", err=True)

    output_lines = [
        f"; Disassembly of {input_file.name}",
        f"; Size: {len(data)} bytes",
        f"; Base address: ${base_address:03X}",
        "",
    ]

    if show_hex:
        output_lines.extend(hex_dump(data, base_address))

    instructions = Chip8Disassembler().disassemble(
        data, start_address=base_address, count=count
    )
    output_lines.extend(str(instr) for instr in instructions)

    result = "\n".join(output_lines) + "\n"

    if output:
        try:
            output.write_text(result, encoding="utf-8")
        except OSError as e:
            handle_cli_exception(e, verbose=verbose)
        if verbose:
            click.echo(f"Output written to: {output}", err=True)
    else:
        click.echo(result, nl=False)

    if verbose:
        click.echo(f"Instructions disassembled: {len(instructions)}", err=True)


if __name__ == "__main__":
    main()
