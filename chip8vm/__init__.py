"""CHIP-8 interpreter package."""

from chip8vm.state import EmulatorState, RunState, create_state
from chip8vm.emulator import execute, fetch, tick, load_rom, load_rom_file, resolve_key_wait
from chip8vm.decode import DecodedInstruction, Operation, decode
from chip8vm.config import (
    EmulatorConfig, ShiftMode, JumpMode, MemoryMode, SpriteEdgeMode,
    StackOverflowPolicy, UnknownOpcodePolicy, load_config,
)
from chip8vm.errors import (
    Chip8Error, ConfigError, OversizedRom, UnreadableRom, MissingRomArgument,
    MachineFault, UnknownOpcode, StackUnderflow, StackOverflow,
)
from chip8vm.interpreter import Interpreter
from chip8vm.constants import PROGRAM_START, FONT_START, SCREEN_WIDTH, SCREEN_HEIGHT, MAX_ROM_SIZE

__all__ = [
    "EmulatorState",
    "RunState",
    "create_state",
    "fetch",
    "execute",
    "tick",
    "load_rom",
    "load_rom_file",
    "resolve_key_wait",
    "DecodedInstruction",
    "Operation",
    "decode",
    "EmulatorConfig",
    "ShiftMode",
    "JumpMode",
    "MemoryMode",
    "SpriteEdgeMode",
    "StackOverflowPolicy",
    "UnknownOpcodePolicy",
    "load_config",
    "Chip8Error",
    "ConfigError",
    "OversizedRom",
    "UnreadableRom",
    "MissingRomArgument",
    "MachineFault",
    "UnknownOpcode",
    "StackUnderflow",
    "StackOverflow",
    "Interpreter",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_ROM_SIZE",
]
