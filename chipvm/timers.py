"""CHIP-8 delay and sound timers, decremented at 60 Hz by the host."""

import jax.numpy as jnp
from chipvm.state import EmulatorState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement each nonzero timer by one."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )


def sound_active(state: EmulatorState) -> bool:
    """Whether the buzzer should currently sound."""
    return bool(state.sound_timer > 0)


def delay_active(state: EmulatorState) -> bool:
    return bool(state.delay_timer > 0)
