"""Errors raised by the CHIP-8 interpreter and its ROM loader."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by chip8vm."""


class RomError(Chip8Error):
    """Problem obtaining a program image before execution starts."""


class OversizedRom(RomError):
    """ROM does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


class UnreadableRom(RomError):
    """ROM path could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read ROM '{path}': {reason}")
        self.path = path


class MissingRomArgument(RomError):
    """No ROM path given on the command line."""

    def __init__(self):
        super().__init__("missing required ROM path argument")


class MachineFault(Chip8Error):
    """Error raised while executing an instruction.

    Carries the address the instruction was fetched from and the raw opcode so
    that the driver can print a precise diagnostic.
    """

    def __init__(self, message: str, address: Optional[int] = None, opcode: Optional[int] = None):
        self.address = address
        self.opcode = opcode
        location = ""
        if address is not None:
            location += f" at 0x{address:03X}"
        if opcode is not None:
            location += f" (opcode 0x{opcode:04X})"
        super().__init__(f"{message}{location}")


class UnknownOpcode(MachineFault):
    """Opcode outside the documented instruction table."""

    def __init__(self, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__("Unknown opcode", address, opcode)


class StackUnderflow(MachineFault):
    """Return executed with an empty call stack."""

    def __init__(self, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__("Return with empty call stack", address, opcode)


class StackOverflow(MachineFault):
    """Call executed with a full call stack."""

    def __init__(self, depth: int, address: Optional[int] = None, opcode: Optional[int] = None):
        self.depth = depth
        super().__init__(f"Call stack exceeded {depth} entries", address, opcode)


class ConfigError(Chip8Error):
    """Invalid emulator configuration file or override."""
