"""Command-line entry point: load a ROM and run it in a pygame window."""

import argparse
import sys
import time
from typing import List, Optional

import pygame

from chip8vm.config import EmulatorConfig, load_config
from chip8vm.emulator import read_rom_file
from chip8vm.errors import Chip8Error, ConfigError, MissingRomArgument, RomError
from chip8vm.interpreter import Interpreter
from chip8vm.logging import get_logger, set_global_level
from chip8vm.pygame_host import PygameDisplay, PygameKeyboard, create_audio

logger = get_logger("chip8vm")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="Run a CHIP-8 ROM.",
        epilog="Overrides use key=value form, e.g. shift_mode=LEGACY stack_depth=12.",
    )
    parser.add_argument("rom", nargs="?", help="path to the ROM image")
    parser.add_argument("overrides", nargs="*", help="configuration overrides (key=value)")
    parser.add_argument("--config", dest="config_path", help="YAML configuration file")
    parser.add_argument("--seed", type=int, default=0, help="seed for CXNN random numbers")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> tuple[argparse.Namespace, EmulatorConfig]:
    """Parse the command line.

    Raises:
        MissingRomArgument: no ROM path was given
        ConfigError: bad configuration file or override
    """
    args = build_parser().parse_args(argv)
    if not args.rom:
        raise MissingRomArgument()
    config = load_config(args.config_path, args.overrides)
    return args, config


class TickSchedule:
    """Counts the timer ticks owed since ``start`` at ``timer_hz``.

    Frames that overrun their slot still receive every tick that fell due, so
    the delay and sound timers follow wall-clock time.
    """

    def __init__(self, timer_hz: float, start: float):
        self.timer_hz = timer_hz
        self.start = start
        self.ticks = 0

    def due(self, now: float) -> int:
        target = int((now - self.start) * self.timer_hz)
        owed = max(target - self.ticks, 0)
        self.ticks += owed
        return owed


def run(interpreter: Interpreter, keyboard: PygameKeyboard) -> None:
    """Drive the interpreter until the window is closed or Escape is pressed."""
    clock = pygame.time.Clock()
    timer_hz = interpreter.config.timer_hz
    schedule = TickSchedule(timer_hz, time.perf_counter())
    while True:
        if not interpreter.awaiting_key:
            keyboard.clear_presses()
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                logger.info(f"Quit after {interpreter.cycles} instructions")
                return
            keyboard.handle_event(event)
        interpreter.run_frame(schedule.due(time.perf_counter()))
        clock.tick(timer_hz)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args, config = parse_args(argv)
    except (MissingRomArgument, ConfigError) as exc:
        build_parser().print_usage(sys.stderr)
        logger.error(str(exc))
        return EXIT_USAGE

    set_global_level(config.log_level)

    interpreter = Interpreter(config, seed=args.seed)
    try:
        interpreter.load(read_rom_file(args.rom))
    except RomError as exc:
        logger.error(str(exc))
        return EXIT_FAILURE
    logger.info(f"Loaded {args.rom}")

    try:
        pygame.init()
        interpreter.presentation = PygameDisplay(config.scale, config.color_scheme, f"chip8vm - {args.rom}")
    except pygame.error as exc:
        logger.critical(f"Could not open a display: {exc}")
        pygame.quit()
        return EXIT_FAILURE
    keyboard = PygameKeyboard()
    interpreter.audio = create_audio(config)
    interpreter.input_source = keyboard

    start = time.time()
    try:
        run(interpreter, keyboard)
    except Chip8Error as exc:
        logger.critical(str(exc))
        return EXIT_FAILURE
    finally:
        interpreter.audio.stop_tone()
        pygame.quit()
        logger.debug(f"Ran for {time.time() - start:.1f}s")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
