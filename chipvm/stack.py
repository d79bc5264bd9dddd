"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipvm.constants import STACK_SIZE
from chipvm.errors import StackOverflow, StackUnderflow
from chipvm.state import StackState


def depth(stack: StackState) -> int:
    return int(stack.pointer)


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    if depth(stack) >= STACK_SIZE:
        raise StackOverflow(int(address))
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if depth(stack) == 0:
        raise StackUnderflow()
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
