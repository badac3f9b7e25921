"""Framebuffer rendering helpers for hosts.

Pure numpy; the window and any other presentation layer build on these.
"""

import numpy as np

from . import config

on_color = (255, 255, 255, 255)
off_color = (0, 0, 0, 255)


def to_rgba(frame, scale=config.scale, on=on_color, off=off_color, flip=True):
    """Upscale a (height, width) 0/1 frame into an RGBA uint8 image.

    ``flip`` puts row 0 at the bottom, the way pyglet's image origin expects.
    """
    frame = np.asarray(frame, dtype=np.uint8)
    palette = np.array([off, on], dtype=np.uint8)
    small = palette[frame & 1]
    if flip:
        small = small[::-1]
    if scale != 1:
        small = np.repeat(np.repeat(small, scale, axis=0), scale, axis=1)
    return np.ascontiguousarray(small)


def render_text(frame, on="#", off="."):
    frame = np.asarray(frame)
    return "\n".join("".join(on if cell else off for cell in row) for row in frame)
