"""Keyboard collaborators for the CHIP-8 hex keypad."""

import abc
from typing import Optional

import jax.numpy as jnp

from chipvm.constants import NUM_KEYS


class KeyboardDriver(abc.ABC):
    """Capability set the engine needs from an input backend.

    The engine only calls the read side (``is_key_pressed`` and ``get_key``);
    ``press`` and ``release`` are driven by whatever adapter feeds input.
    """

    @abc.abstractmethod
    def is_key_pressed(self, key: int) -> bool:
        ...

    @abc.abstractmethod
    def get_key(self) -> Optional[int]:
        ...

    @abc.abstractmethod
    def press(self, key: int):
        ...

    @abc.abstractmethod
    def release(self, key: int):
        ...


def _check_key(key: int) -> int:
    key = int(key)
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index must be in [0, {NUM_KEYS}), got {key}")
    return key


class Keypad(KeyboardDriver):
    """In-memory 16-key hex keypad."""

    def __init__(self, pressed=()):
        self.keys = jnp.zeros(NUM_KEYS, dtype=jnp.bool_)
        for key in pressed:
            self.press(key)

    def is_key_pressed(self, key: int) -> bool:
        return bool(self.keys[_check_key(key)])

    def get_key(self) -> Optional[int]:
        """Lowest pressed key index, or None."""
        if not bool(jnp.any(self.keys)):
            return None
        return int(jnp.argmax(self.keys))

    def press(self, key: int):
        self.keys = self.keys.at[_check_key(key)].set(True)

    def release(self, key: int):
        self.keys = self.keys.at[_check_key(key)].set(False)

    def release_all(self):
        self.keys = jnp.zeros(NUM_KEYS, dtype=jnp.bool_)

    def __repr__(self):
        pressed = [f"{i:X}" for i in range(NUM_KEYS) if bool(self.keys[i])]
        return f"Keypad(pressed=[{', '.join(pressed)}])"
