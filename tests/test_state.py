"""Tests for state creation and host accessors."""

import jax.numpy as jnp
import numpy as np
import pytest
from chipvm import (
    create_state, set_key, is_key_pressed, get_pixel, set_pixel, display_snapshot,
    PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT, Quirks, COSMAC_VIP,
)


class TestCreateState:
    """Test initial state."""

    def test_initial_registers(self, fresh_state):
        assert fresh_state.pc == PROGRAM_START
        assert fresh_state.I == 0
        assert jnp.all(fresh_state.V == 0)
        assert fresh_state.stack.pointer == 0
        assert fresh_state.delay_timer == 0
        assert fresh_state.sound_timer == 0

    def test_initial_display_and_keypad(self, fresh_state):
        assert fresh_state.display.shape == (SCREEN_WIDTH, SCREEN_HEIGHT)
        assert not jnp.any(fresh_state.display)
        assert not jnp.any(fresh_state.keypad)

    def test_program_area_empty(self, fresh_state):
        assert jnp.all(fresh_state.memory[PROGRAM_START:] == 0)

    def test_quirks_carried(self):
        assert create_state().quirks == Quirks()
        assert create_state(quirks=COSMAC_VIP).quirks.vf_reset


class TestQuirkPresets:
    """Test named quirk presets."""

    def test_from_name(self):
        assert Quirks.from_name("cosmac_vip") == COSMAC_VIP
        assert Quirks.from_name("default") == Quirks()

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            Quirks.from_name("xo-chip")


class TestKeypad:
    """Test keypad accessors."""

    def test_press_and_release(self, fresh_state):
        state = set_key(fresh_state, 0xA, True)
        assert is_key_pressed(state, 0xA)
        assert not is_key_pressed(state, 0xB)

        state = set_key(state, 0xA, False)
        assert not is_key_pressed(state, 0xA)

    @pytest.mark.parametrize("key", [-1, 16, 100])
    def test_invalid_key(self, fresh_state, key):
        with pytest.raises(ValueError):
            set_key(fresh_state, key, True)


class TestPixels:
    """Test pixel accessors and snapshots."""

    def test_set_and_get_pixel(self, fresh_state):
        state = set_pixel(fresh_state, 3, 4, True)

        assert get_pixel(state, 3, 4)
        assert not get_pixel(state, 4, 3)

    def test_pixel_coordinates_wrap(self, fresh_state):
        state = set_pixel(fresh_state, SCREEN_WIDTH + 1, SCREEN_HEIGHT + 2, True)

        assert get_pixel(state, 1, 2)

    def test_snapshot_is_row_major_and_read_only(self, fresh_state):
        state = set_pixel(fresh_state, 10, 20, True)

        snapshot = display_snapshot(state)

        assert snapshot.shape == (SCREEN_HEIGHT, SCREEN_WIDTH)
        assert snapshot.dtype == np.bool_
        assert snapshot[20, 10]
        assert snapshot.sum() == 1
        with pytest.raises(ValueError):
            snapshot[0, 0] = True

    def test_snapshot_detached_from_state(self, fresh_state):
        snapshot = display_snapshot(fresh_state)
        state = set_pixel(fresh_state, 0, 0, True)

        assert not snapshot[0, 0]
        assert display_snapshot(state)[0, 0]
