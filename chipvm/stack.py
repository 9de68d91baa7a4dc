"""CHIP-8 stack operations."""

import jax.numpy as jnp

from chipvm.constants import ADDRESS_MASK, STACK_SIZE
from chipvm.errors import StackOverflowError, StackUnderflowError
from chipvm.state import StackState


def push(stack: StackState, address: int) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"Call stack overflow pushing 0x{address:03X} (depth {STACK_SIZE})")
    masked_address = address & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflowError("Return with an empty call stack")
    new_pointer = stack.pointer - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address


def frames(stack: StackState) -> jnp.ndarray:
    """Return the active stack frames, oldest first."""
    return stack.data[:stack.pointer]
