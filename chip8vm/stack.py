"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK
from chip8vm.errors import StackOverflow, StackUnderflow
from chip8vm.state import StackState


def is_full(stack: StackState) -> bool:
    return stack.depth >= stack.capacity


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    Raises:
        StackOverflow: stack already holds ``capacity`` return addresses
    """
    if is_full(stack):
        raise StackOverflow(stack.capacity)
    masked_address = int(address) & ADDRESS_MASK
    new_data = stack.data.at[stack.depth].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.depth + 1)


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop address from stack.

    Raises:
        StackUnderflow: stack is empty
    """
    if stack.depth == 0:
        raise StackUnderflow()
    new_pointer = stack.depth - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
