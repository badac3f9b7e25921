import argparse
import sys
from pathlib import Path

from . import config
from .cpu import CPU
from .errors import Chip8Error


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="CHIP-8 interpreter with a pyglet window",
        epilog="Keys: 1234 / QWER / ASDF / ZXCV map to the hex keypad. F1 toggles logs, ESC quits."
    )
    parser.add_argument("rom", help="Path to a CHIP-8 ROM (.ch8)")
    parser.add_argument("--scale", type=int, default=config.scale,
                        help="Pixel scale factor. Default: %(default)s")
    parser.add_argument("--cpu-hz", type=int, default=config.cpu_hz,
                        help="Instructions per second. Default: %(default)s")
    parser.add_argument("--logs", action="store_true", help="Print executed instructions")
    args = parser.parse_args(argv)

    if args.scale < 1 or args.cpu_hz < 1:
        parser.error("--scale and --cpu-hz must be positive")

    rom = Path(args.rom)
    if not rom.is_file():
        print(f"Error: ROM file not found: {args.rom}")
        return 1

    config.set_logs(args.logs)

    cpu = CPU()
    cpu.machine.load_fontset()
    try:
        cpu.load_rom_file(rom)
    except Chip8Error as e:
        print(f"Error: cannot load {args.rom}: {e}")
        return 1

    # imported late so the engine stays usable without a display
    import pyglet
    from .frontend import Chip8Window

    Chip8Window(cpu, scale=args.scale, cpu_hz=args.cpu_hz)
    pyglet.app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
