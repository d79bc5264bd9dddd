"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, MAX_PROGRAM_SIZE,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, NUM_KEYS, NUM_REGISTERS,
)
from chipvm.errors import OutOfMemory
from chipvm.quirks import Quirks


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = field(default_factory=lambda: StackState())
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    quirks: Quirks = Quirks(),
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, quirks=quirks)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Load a raw program image into memory starting at 0x200.

    Raises:
        OutOfMemory: if the image is larger than the space above PROGRAM_START.
    """
    if len(data) > MAX_PROGRAM_SIZE:
        raise OutOfMemory(len(data), MAX_PROGRAM_SIZE)
    if len(data) == 0:
        return state
    program = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(program)
    return state.replace(memory=new_memory)


def _check_key(key: int) -> int:
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {key}")
    return key


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Mark keypad key 0x0-0xF as pressed or released."""
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(pressed))


def is_key_pressed(state: EmulatorState, key: int) -> bool:
    return bool(state.keypad[_check_key(key)])


def get_pixel(state: EmulatorState, x: int, y: int) -> bool:
    """Read a display pixel, coordinates wrap around the screen."""
    return bool(state.display[x % SCREEN_WIDTH, y % SCREEN_HEIGHT])


def set_pixel(state: EmulatorState, x: int, y: int, on: bool) -> EmulatorState:
    """Write a display pixel, coordinates wrap around the screen."""
    return state.replace(display=state.display.at[x % SCREEN_WIDTH, y % SCREEN_HEIGHT].set(on))


def display_snapshot(state: EmulatorState) -> np.ndarray:
    """Read-only copy of the display as a (height, width) boolean array indexed [y, x]."""
    snapshot = np.array(state.display, dtype=np.bool_).T.copy()
    snapshot.flags.writeable = False
    return snapshot
