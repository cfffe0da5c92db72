"""CHIP-8 instruction decoding."""

from enum import Enum

from chex import dataclass


class Operation(Enum):
    """Every documented CHIP-8 operation, plus UNKNOWN for anything else."""
    CLEAR_SCREEN = "00E0"
    RETURN = "00EE"
    JUMP = "1NNN"
    CALL = "2NNN"
    SKIP_EQ_IMM = "3XNN"
    SKIP_NE_IMM = "4XNN"
    SKIP_EQ_REG = "5XY0"
    SET_IMM = "6XNN"
    ADD_IMM = "7XNN"
    MOVE = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB_XY = "8XY5"
    SHIFT_RIGHT = "8XY6"
    SUB_YX = "8XY7"
    SHIFT_LEFT = "8XYE"
    SKIP_NE_REG = "9XY0"
    SET_INDEX = "ANNN"
    JUMP_OFFSET = "BNNN"
    RANDOM = "CXNN"
    DRAW = "DXYN"
    SKIP_KEY = "EX9E"
    SKIP_NOT_KEY = "EXA1"
    GET_DELAY = "FX07"
    WAIT_KEY = "FX0A"
    SET_DELAY = "FX15"
    SET_SOUND = "FX18"
    ADD_INDEX = "FX1E"
    FONT_CHARACTER = "FX29"
    BCD = "FX33"
    STORE_REGISTERS = "FX55"
    LOAD_REGISTERS = "FX65"
    UNKNOWN = "????"


# Families fully identified by the first nibble
_SINGLE = {
    0x1: Operation.JUMP,
    0x2: Operation.CALL,
    0x3: Operation.SKIP_EQ_IMM,
    0x4: Operation.SKIP_NE_IMM,
    0x6: Operation.SET_IMM,
    0x7: Operation.ADD_IMM,
    0xA: Operation.SET_INDEX,
    0xB: Operation.JUMP_OFFSET,
    0xC: Operation.RANDOM,
    0xD: Operation.DRAW,
}

_SYSTEM = {
    0x00E0: Operation.CLEAR_SCREEN,
    0x00EE: Operation.RETURN,
}

# Keyed by the low nibble
_ALU = {
    0x0: Operation.MOVE,
    0x1: Operation.OR,
    0x2: Operation.AND,
    0x3: Operation.XOR,
    0x4: Operation.ADD_REG,
    0x5: Operation.SUB_XY,
    0x6: Operation.SHIFT_RIGHT,
    0x7: Operation.SUB_YX,
    0xE: Operation.SHIFT_LEFT,
}

# Keyed by the low byte
_KEY = {
    0x9E: Operation.SKIP_KEY,
    0xA1: Operation.SKIP_NOT_KEY,
}

_MISC = {
    0x07: Operation.GET_DELAY,
    0x0A: Operation.WAIT_KEY,
    0x15: Operation.SET_DELAY,
    0x18: Operation.SET_SOUND,
    0x1E: Operation.ADD_INDEX,
    0x29: Operation.FONT_CHARACTER,
    0x33: Operation.BCD,
    0x55: Operation.STORE_REGISTERS,
    0x65: Operation.LOAD_REGISTERS,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    operation: Operation
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    @property
    def is_known(self) -> bool:
        return self.operation is not Operation.UNKNOWN


def classify(instruction: int) -> Operation:
    """Map a 16-bit instruction to its Operation."""
    family = (instruction & 0xF000) >> 12
    if family in _SINGLE:
        return _SINGLE[family]
    if family == 0x0:
        return _SYSTEM.get(instruction, Operation.UNKNOWN)
    if family == 0x5 and instruction & 0x000F == 0:
        return Operation.SKIP_EQ_REG
    if family == 0x9 and instruction & 0x000F == 0:
        return Operation.SKIP_NE_REG
    if family == 0x8:
        return _ALU.get(instruction & 0x000F, Operation.UNKNOWN)
    if family == 0xE:
        return _KEY.get(instruction & 0x00FF, Operation.UNKNOWN)
    if family == 0xF:
        return _MISC.get(instruction & 0x00FF, Operation.UNKNOWN)
    return Operation.UNKNOWN


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        operation=classify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
