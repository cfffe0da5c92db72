"""Tests for framebuffer packing and the pure compositor."""

import jax.numpy as jnp
import numpy as np
from chip8vm.config import SpriteEdgeMode
from chip8vm.framebuffer import draw_sprite, pack_rows, unpack_rows, sprite_mask
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme, framebuffer_to_rgb

import pytest

BLANK = jnp.zeros((64, 32), dtype=jnp.bool_)


def test_pack_rows_bit_layout():
    display = BLANK.at[0, 0].set(True).at[63, 0].set(True).at[5, 31].set(True)

    words = pack_rows(display)

    assert len(words) == 32
    assert words[0] == (1 << 63) | 1
    assert words[31] == 1 << 5
    assert all(word == 0 for word in words[1:31])


def test_unpack_inverts_pack():
    display = BLANK.at[10, 3].set(True).at[40, 17].set(True)
    assert (unpack_rows(pack_rows(display)) == np.asarray(display)).all()


def test_draw_sprite_reports_collision():
    rows = jnp.array([0xFF], dtype=jnp.uint8)
    display, collision = draw_sprite(BLANK, rows, 0, 0)
    assert not collision
    assert int(jnp.sum(display)) == 8

    display, collision = draw_sprite(display, jnp.array([0x01], dtype=jnp.uint8), 0, 0)
    assert collision
    assert not display[7, 0]
    assert display[6, 0]


def test_draw_sprite_is_pure():
    rows = jnp.array([0x80], dtype=jnp.uint8)
    draw_sprite(BLANK, rows, 1, 1)
    assert int(jnp.sum(BLANK)) == 0


def test_corner_wrap_and_clip():
    rows = jnp.array([0xC0, 0xC0], dtype=jnp.uint8)

    wrapped = sprite_mask(rows, 63, 31, SpriteEdgeMode.WRAP)
    clipped = sprite_mask(rows, 63, 31, SpriteEdgeMode.CLIP)

    assert {(int(x), int(y)) for x, y in zip(*np.nonzero(np.asarray(wrapped)))} == {(63, 31), (0, 31), (63, 0), (0, 0)}
    assert {(int(x), int(y)) for x, y in zip(*np.nonzero(np.asarray(clipped)))} == {(63, 31)}


def test_rgb_rendering_shape_and_colors():
    on, off = create_color_scheme("amber")
    display = BLANK.at[2, 1].set(True)

    rgb = chip8_display_to_rgb(display, scale=2, on_color=on, off_color=off)

    assert rgb.shape == (64, 128, 3)
    assert tuple(rgb[2, 4]) == on
    assert tuple(rgb[0, 0]) == off
    assert (framebuffer_to_rgb(pack_rows(display), 2, on, off) == rgb).all()


def test_unknown_color_scheme():
    with pytest.raises(ValueError):
        create_color_scheme("plaid")
