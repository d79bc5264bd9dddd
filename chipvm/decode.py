"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass

from chipvm.errors import UnknownOpcode


class Op(enum.Enum):
    """Instruction classes of the CHIP-8 instruction set."""
    NO_OPERATION = "0000"
    CLEAR_SCREEN = "00E0"
    RETURN = "00EE"
    JUMP = "1NNN"
    CALL = "2NNN"
    SKIP_IF_EQUAL_IMMEDIATE = "3XNN"
    SKIP_IF_NOT_EQUAL_IMMEDIATE = "4XNN"
    SKIP_IF_EQUAL_REGISTER = "5XY0"
    SET_IMMEDIATE = "6XNN"
    ADD_IMMEDIATE = "7XNN"
    SET_REGISTER = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REGISTER = "8XY4"
    SUBTRACT = "8XY5"
    SHIFT_RIGHT = "8XY6"
    SUBTRACT_REVERSE = "8XY7"
    SHIFT_LEFT = "8XYE"
    SKIP_IF_NOT_EQUAL_REGISTER = "9XY0"
    SET_INDEX = "ANNN"
    JUMP_WITH_OFFSET = "BNNN"
    RANDOM = "CXNN"
    DRAW = "DXYN"
    SKIP_IF_KEY = "EX9E"
    SKIP_IF_NOT_KEY = "EXA1"
    GET_DELAY_TIMER = "FX07"
    WAIT_FOR_KEY = "FX0A"
    SET_DELAY_TIMER = "FX15"
    SET_SOUND_TIMER = "FX18"
    ADD_TO_INDEX = "FX1E"
    FONT_CHARACTER = "FX29"
    BCD = "FX33"
    STORE_REGISTERS = "FX55"
    LOAD_REGISTERS = "FX65"


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# Whole-word matches in the 0x0 family
_SYSTEM_OPS = {
    0x0000: Op.NO_OPERATION,
    0x00E0: Op.CLEAR_SCREEN,
    0x00EE: Op.RETURN,
}

# Families fully identified by their first nibble
_FAMILY_OPS = {
    0x1: Op.JUMP,
    0x2: Op.CALL,
    0x3: Op.SKIP_IF_EQUAL_IMMEDIATE,
    0x4: Op.SKIP_IF_NOT_EQUAL_IMMEDIATE,
    0x6: Op.SET_IMMEDIATE,
    0x7: Op.ADD_IMMEDIATE,
    0xA: Op.SET_INDEX,
    0xB: Op.JUMP_WITH_OFFSET,
    0xC: Op.RANDOM,
    0xD: Op.DRAW,
}

# Families selected by their last nibble
_REGISTER_OPS = {
    0x5: {0x0: Op.SKIP_IF_EQUAL_REGISTER},
    0x8: {
        0x0: Op.SET_REGISTER,
        0x1: Op.OR,
        0x2: Op.AND,
        0x3: Op.XOR,
        0x4: Op.ADD_REGISTER,
        0x5: Op.SUBTRACT,
        0x6: Op.SHIFT_RIGHT,
        0x7: Op.SUBTRACT_REVERSE,
        0xE: Op.SHIFT_LEFT,
    },
    0x9: {0x0: Op.SKIP_IF_NOT_EQUAL_REGISTER},
}

# Families selected by their last byte
_BYTE_OPS = {
    0xE: {
        0x9E: Op.SKIP_IF_KEY,
        0xA1: Op.SKIP_IF_NOT_KEY,
    },
    0xF: {
        0x07: Op.GET_DELAY_TIMER,
        0x0A: Op.WAIT_FOR_KEY,
        0x15: Op.SET_DELAY_TIMER,
        0x18: Op.SET_SOUND_TIMER,
        0x1E: Op.ADD_TO_INDEX,
        0x29: Op.FONT_CHARACTER,
        0x33: Op.BCD,
        0x55: Op.STORE_REGISTERS,
        0x65: Op.LOAD_REGISTERS,
    },
}


def _classify(instruction: int, opcode: int, n: int, nn: int) -> Op:
    if instruction in _SYSTEM_OPS:
        return _SYSTEM_OPS[instruction]
    if opcode in _FAMILY_OPS:
        return _FAMILY_OPS[opcode]
    if opcode in _REGISTER_OPS and n in _REGISTER_OPS[opcode]:
        return _REGISTER_OPS[opcode][n]
    if opcode in _BYTE_OPS and nn in _BYTE_OPS[opcode]:
        return _BYTE_OPS[opcode][nn]
    raise UnknownOpcode(instruction)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Raises:
        UnknownOpcode: if the word matches no instruction pattern.
    """
    instruction = int(instruction) & 0xFFFF
    opcode = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF
    return DecodedInstruction(
        raw=instruction,
        op=_classify(instruction, opcode, n, nn),
        opcode=opcode,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=instruction & 0x0FFF
    )
