"""Main CHIP-8 emulator execution engine."""

import enum
from functools import partial

import jax
import jax.numpy as jnp
from chipvm.state import EmulatorState, load_program
from chipvm.decode import DecodedInstruction, Op, decode
from chipvm.constants import MEMORY_SIZE
from chipvm.errors import InvalidFetch
from chipvm.instructions.system import execute_no_operation, execute_clear_screen, execute_return
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipvm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


class StepStatus(enum.Enum):
    """Outcome of a single step."""
    EXECUTED = "executed"
    WAITING_FOR_KEY = "waiting_for_key"


HANDLERS = {
    Op.NO_OPERATION: execute_no_operation,
    Op.CLEAR_SCREEN: execute_clear_screen,
    Op.RETURN: execute_return,
    Op.JUMP: execute_jump,
    Op.CALL: execute_call,
    Op.SKIP_IF_EQUAL_IMMEDIATE: execute_skip_if_equal_immediate,
    Op.SKIP_IF_NOT_EQUAL_IMMEDIATE: execute_skip_if_not_equal_immediate,
    Op.SKIP_IF_EQUAL_REGISTER: execute_skip_if_equal_register,
    Op.SET_IMMEDIATE: execute_set,
    Op.ADD_IMMEDIATE: execute_add,
    Op.SET_REGISTER: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REGISTER: execute_alu_add,
    Op.SUBTRACT: execute_alu_sub_xy,
    Op.SHIFT_RIGHT: execute_alu_shift_right,
    Op.SUBTRACT_REVERSE: execute_alu_sub_yx,
    Op.SHIFT_LEFT: execute_alu_shift_left,
    Op.SKIP_IF_NOT_EQUAL_REGISTER: execute_skip_if_not_equal_register,
    Op.SET_INDEX: execute_set_index,
    Op.JUMP_WITH_OFFSET: execute_jump_with_offset,
    Op.RANDOM: execute_random,
    Op.DRAW: execute_display,
    Op.SKIP_IF_KEY: execute_skip_if_key,
    Op.SKIP_IF_NOT_KEY: execute_skip_if_not_key,
    Op.GET_DELAY_TIMER: execute_get_delay_timer,
    Op.WAIT_FOR_KEY: execute_wait_for_key,
    Op.SET_DELAY_TIMER: execute_set_delay_timer,
    Op.SET_SOUND_TIMER: execute_set_sound_timer,
    Op.ADD_TO_INDEX: execute_add_to_index,
    Op.FONT_CHARACTER: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.STORE_REGISTERS: execute_store_registers,
    Op.LOAD_REGISTERS: execute_load_registers,
}

_missing = set(Op) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No handler for {sorted(op.name for op in _missing)}")

# Stack handlers check depth on concrete values and raise, so they stay eager
EAGER_OPS = frozenset({Op.CALL, Op.RETURN})

OPERAND_FIELDS = ("raw", "opcode", "x", "y", "n", "nn", "nnn")


def compile_handler(op: Op, handler):
    """Wrap an instruction handler in jax.jit.

    Operand fields are traced arguments and quirks are static fields of the
    state, so each instruction class compiles once for every operand value.
    """
    @partial(jax.jit, static_argnames="advance")
    def compiled(state: EmulatorState, operands: dict, advance: bool = False) -> EmulatorState:
        if advance:
            state = state.replace(pc=state.pc + 2)
        return handler(state, DecodedInstruction(op=op, **operands))
    return compiled


COMPILED_HANDLERS = {
    op: compile_handler(op, handler)
    for op, handler in HANDLERS.items()
    if op not in EAGER_OPS
}


def _operands(instruction: DecodedInstruction) -> dict:
    return {name: getattr(instruction, name) for name in OPERAND_FIELDS}


def dispatch(state: EmulatorState, instruction: DecodedInstruction, advance: bool = False) -> EmulatorState:
    """Apply an already decoded instruction.

    Args:
        state: Current emulator state
        instruction: Decoded instruction
        advance: Move PC past the instruction first, as a fetch would
    """
    if instruction.op in EAGER_OPS:
        if advance:
            state = state.replace(pc=state.pc + 2)
        return HANDLERS[instruction.op](state, instruction)
    return COMPILED_HANDLERS[instruction.op](state, _operands(instruction), advance=advance)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    return dispatch(state, decode(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


@jax.jit
def _read_word(memory: jnp.ndarray, pc: int) -> jnp.ndarray:
    return _pack_u16(memory[pc], memory[pc + 1])


def _word_at(state: EmulatorState, pc: int) -> int:
    if pc >= MEMORY_SIZE - 1:
        raise InvalidFetch(pc)
    return int(_read_word(state.memory, pc))


def peek(state: EmulatorState) -> int:
    """Read the instruction word at PC without advancing."""
    return _word_at(state, int(state.pc))


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance PC past it."""
    instruction = peek(state)
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> tuple[EmulatorState, StepStatus]:
    """Run one fetch-decode-execute cycle.

    Raises:
        InvalidFetch, UnknownOpcode, StackOverflow, StackUnderflow
    """
    instruction_pc = int(state.pc)
    decoded = decode(_word_at(state, instruction_pc))
    state = dispatch(state, decoded, advance=True)

    if decoded.op is Op.WAIT_FOR_KEY and int(state.pc) == instruction_pc:
        return state, StepStatus.WAITING_FOR_KEY
    return state, StepStatus.EXECUTED


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file contents into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
