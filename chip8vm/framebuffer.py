"""Sprite compositing and framebuffer snapshots.

The compositor is a pure function of (display, sprite rows, origin): it knows
nothing about the presentation surface. ``pack_rows`` produces the snapshot
handed to presentation collaborators: one 64-bit word per screen row, bit x
set when column x is lit.
"""

from functools import partial
from typing import List, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.config import SpriteEdgeMode
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT

SPRITE_WIDTH = 8

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')

_COLUMN_BITS = np.left_shift(np.uint64(1), np.arange(SCREEN_WIDTH, dtype=np.uint64))


@partial(jax.jit, static_argnames="edge_mode")
def sprite_mask(
    rows: jnp.ndarray,
    origin_x: int,
    origin_y: int,
    edge_mode: SpriteEdgeMode = SpriteEdgeMode.WRAP,
) -> jnp.ndarray:
    """Expand sprite bytes into a full-screen boolean mask.

    Args:
        rows: uint8 array, one byte per sprite row (MSB is the leftmost pixel)
        origin_x: Left column, already reduced modulo SCREEN_WIDTH
        origin_y: Top row, already reduced modulo SCREEN_HEIGHT
        edge_mode: Wrap pixels past an edge to the opposite side, or drop them

    Returns:
        Boolean array of shape (SCREEN_WIDTH, SCREEN_HEIGHT)
    """
    height = rows.shape[0]
    if height == 0:
        return jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)

    if edge_mode is SpriteEdgeMode.WRAP:
        col_offset = (xx - origin_x) % SCREEN_WIDTH
        row_offset = (yy - origin_y) % SCREEN_HEIGHT
    else:
        col_offset = xx - origin_x
        row_offset = yy - origin_y

    in_sprite = (col_offset >= 0) & (col_offset < SPRITE_WIDTH) & (row_offset >= 0) & (row_offset < height)

    safe_rows = jnp.clip(row_offset, 0, height - 1)
    safe_cols = jnp.clip(col_offset, 0, SPRITE_WIDTH - 1)
    sprite_bytes = rows[safe_rows]
    bits = (sprite_bytes >> (7 - safe_cols)) & 1
    return (bits == 1) & in_sprite


def draw_sprite(
    display: jnp.ndarray,
    rows: jnp.ndarray,
    origin_x: int,
    origin_y: int,
    edge_mode: SpriteEdgeMode = SpriteEdgeMode.WRAP,
) -> tuple[jnp.ndarray, bool]:
    """XOR a sprite onto the display.

    Returns:
        (new display, collision) where collision is True when any pixel that
        was lit has been turned off
    """
    display, collision = _composite(display, rows, origin_x, origin_y, edge_mode)
    return display, bool(collision)


@partial(jax.jit, static_argnames="edge_mode")
def _composite(display, rows, origin_x, origin_y, edge_mode):
    sprite = sprite_mask(rows, origin_x, origin_y, edge_mode)
    return display ^ sprite, jnp.any(display & sprite)


def clear_display(display: jnp.ndarray) -> jnp.ndarray:
    return jnp.zeros_like(display)


def pack_rows(display) -> List[int]:
    """Pack a (64, 32) boolean display into 32 row words of 64 bits."""
    pixels = np.asarray(display, dtype=np.bool_).T
    words = np.bitwise_or.reduce(np.where(pixels, _COLUMN_BITS, np.uint64(0)), axis=1)
    return [int(word) for word in words]


def unpack_rows(words: Sequence[int]) -> np.ndarray:
    """Inverse of ``pack_rows``: row words back to a (64, 32) boolean array."""
    rows = np.array([[(word >> x) & 1 for x in range(SCREEN_WIDTH)] for word in words], dtype=np.bool_)
    return rows.T
