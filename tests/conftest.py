"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, COSMAC_VIP, MODERN


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def cosmac_state():
    """Provide a fresh state with the original COSMAC VIP quirks."""
    return create_state(quirks=COSMAC_VIP)


@pytest.fixture
def modern_state():
    """Provide a fresh state with modern interpreter quirks."""
    return create_state(quirks=MODERN)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*instructions):
    """Helper to turn instruction words into a big-endian program image."""
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)
