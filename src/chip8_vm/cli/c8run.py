"""
c8run - Headless CHIP-8 Runner
==============================

This module implements a command-line runner for CHIP-8 ROMs. It executes
a ROM for a fixed instruction budget without any window or audio, then
reports where execution stopped and optionally dumps the display and
registers. It is intended for testing ROMs and for scripting.

Usage Examples
--------------
Run a ROM for the default budget and show the screen:
    $ c8run pong.ch8 --show-screen

Run with a reproducible random source and held keys:
    $ c8run game.ch8 --seed 42 --keys q,0xA --steps 50000

Save a screenshot:
    $ c8run ibm_logo.ch8 --screenshot logo.png --scale 10

Exit Codes
----------
0 - Program ran (either exited or used up its budget)
1 - ROM rejected or VM error during execution
2 - Invalid arguments or missing files
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.context import Context, pass_context
from chip8_vm.cli.errors import handle_cli_exception
from chip8_vm.emulator import Emulator, EmulatorConfig, StopReason

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=1),
    default=10_000,
    show_default=True,
    help="Maximum number of instructions to execute",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction (Cxnn)",
)
@click.option(
    "--cpu-hz",
    type=click.IntRange(min=1),
    default=500,
    show_default=True,
    help="Nominal instructions per second (affects frame pacing only)",
)
@click.option(
    "-k", "--keys",
    type=str,
    default="",
    help="Comma-separated keys held for the whole run (e.g. 'q,w,0xA')",
)
@click.option(
    "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the final display to a PNG file",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Screenshot pixel scale",
)
@click.option(
    "--show-screen",
    is_flag=True,
    help="Print the final display as text",
)
@click.option(
    "--show-registers",
    is_flag=True,
    help="Print the final register state",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Trace every instruction (DEBUG logging)",
)
@click.version_option(version=__version__, prog_name="c8run")
@pass_context
def main(
    ctx: Context,
    rom: Path,
    steps: int,
    seed: Optional[int],
    cpu_hz: int,
    keys: str,
    screenshot: Optional[Path],
    scale: int,
    show_screen: bool,
    show_registers: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headlessly.

    ROM is the binary image to load at 0x200.
    """
    ctx.verbose = verbose
    ctx.setup_logging()

    try:
        emu = Emulator(EmulatorConfig(cpu_hz=cpu_hz, seed=seed))
        emu.load_rom(rom)

        for key in filter(None, (k.strip() for k in keys.split(","))):
            try:
                emu.press_key(key)
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="--keys") from None

        result = emu.run(max_steps=steps)

        if result.reason == StopReason.EXITED:
            status = "program exited"
        else:
            status = "step limit reached"
        click.echo(
            f"{rom.name}: {status} after {result.steps} steps "
            f"at PC=${result.program_pointer:03X}"
        )

        if show_screen:
            click.echo(emu.display_text)

        if show_registers:
            regs = emu.registers
            click.echo(" ".join(f"V{i:X}={regs[f'V{i:X}']:02X}" for i in range(16)))
            click.echo(
                f"I=${regs['I']:03X} PC=${regs['PC']:03X} SP={regs['SP']} "
                f"DT={regs['DT']} ST={regs['ST']}"
            )

        if screenshot:
            screenshot.write_bytes(emu.render_display(scale=scale))
            if verbose:
                click.echo(f"Screenshot written to: {screenshot}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Run")


if __name__ == "__main__":
    main()
