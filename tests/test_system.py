"""Tests for system instructions (0xxx) and the call stack."""

import pytest
import jax.numpy as jnp
from chipvm import execute, StackOverflow, StackUnderflow, UnknownOpcode, STACK_SIZE


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    state = state.replace(display=state.display.at[63, 31].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_zero_word_is_no_operation(fresh_state):
    """0000 - Leaves the state untouched."""
    state = execute(fresh_state, 0x0000)

    assert state.pc == fresh_state.pc
    assert jnp.array_equal(state.V, fresh_state.V)
    assert jnp.array_equal(state.memory, fresh_state.memory)


@pytest.mark.parametrize("word", [0x0123, 0x0FFF, 0x00E1])
def test_machine_code_call_is_rejected(fresh_state, word):
    """0NNN - Host machine code routines cannot run and are reported."""
    with pytest.raises(UnknownOpcode):
        execute(fresh_state, word)


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_nested_calls_return_in_order(fresh_state):
    """Returns unwind nested calls last-in first-out."""
    state = fresh_state.replace(pc=fresh_state.pc + 2)
    state = execute(state, 0x2300)
    state = state.replace(pc=0x302)
    state = execute(state, 0x2400)

    state = execute(state, 0x00EE)
    assert state.pc == 0x302
    state = execute(state, 0x00EE)
    assert state.pc == 0x202


class TestStackLimits:
    """Test stack overflow and underflow conditions."""

    def test_sixteen_nested_calls_succeed(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)

        assert state.stack.pointer == STACK_SIZE

    def test_seventeenth_call_overflows(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)

        with pytest.raises(StackOverflow) as excinfo:
            execute(state, 0x2300)
        assert excinfo.value.address == 0x300

    def test_return_with_empty_stack_underflows(self, fresh_state):
        with pytest.raises(StackUnderflow):
            execute(fresh_state, 0x00EE)

    def test_failed_call_leaves_state_unchanged(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)

        with pytest.raises(StackOverflow):
            execute(state, 0x2400)
        assert state.pc == 0x300
        assert state.stack.pointer == STACK_SIZE
