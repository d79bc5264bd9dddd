"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, MEMORY_SIZE, FLAG_REGISTER

# Sprites are at most 15 rows tall; 16 rows keep shapes static while every
# wrapped position stays distinct on a 32-row screen.
MAX_SPRITE_ROWS = 16

rows, cols = jnp.meshgrid(jnp.arange(MAX_SPRITE_ROWS), jnp.arange(SPRITE_WIDTH), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean (width, height) mask of the pixels a DXYN sprite toggles."""
    sprite_x = state.V[instruction.x] % SCREEN_WIDTH
    sprite_y = state.V[instruction.y] % SCREEN_HEIGHT

    addresses = (jnp.astype(state.I, jnp.int32) + rows) % MEMORY_SIZE
    sprite_bytes = state.memory[addresses]
    bits = ((sprite_bytes >> (7 - cols)) & 1).astype(jnp.bool_) & (rows < instruction.n)

    px = jnp.astype(sprite_x, jnp.int32) + cols
    py = jnp.astype(sprite_y, jnp.int32) + rows
    if state.quirks.clip_sprites:
        bits = bits & (px < SCREEN_WIDTH) & (py < SCREEN_HEIGHT)

    return jnp.zeros_like(state.display).at[px % SCREEN_WIDTH, py % SCREEN_HEIGHT].set(bits)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
