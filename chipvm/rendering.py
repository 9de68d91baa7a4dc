"""Frame rendering for the CHIP-8 framebuffer."""

from typing import Dict, Optional, Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image

from chipvm.cpu import CPUState
from chipvm.state import consume_display

Color = Tuple[int, int, int]

# name -> (on_color, off_color)
COLOR_SCHEMES: Dict[str, Tuple[Color, Color]] = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
    "pink": ((255, 33, 110), (77, 77, 77)),
}


def display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Convert the boolean framebuffer to an upscaled RGB image.

    Args:
        display: Boolean array of shape (32, 64), indexed [y, x]
        scale: Nearest-neighbour upscaling factor
        on_color: RGB color for lit pixels
        off_color: RGB color for dark pixels

    Returns:
        uint8 array of shape (32*scale, 64*scale, 3)
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")

    pixels = np.asarray(display, dtype=np.bool_)[..., None]
    frame = np.where(pixels, np.array(on_color, dtype=np.uint8), np.array(off_color, dtype=np.uint8))
    return np.kron(frame, np.ones((scale, scale, 1), dtype=np.uint8)) if scale > 1 else frame


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up the ``(on_color, off_color)`` pair of a named scheme."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}")
    return COLOR_SCHEMES[scheme]


def render_if_dirty(
    cpu: CPUState, scale: int = 8, color_scheme: str = "classic"
) -> Tuple[CPUState, Optional[np.ndarray]]:
    """Render a frame only when the framebuffer changed since the last read.

    Returns the engine with the dirty flag cleared and the RGB frame, or the
    unchanged engine and None when there is nothing new to draw.
    """
    if not cpu.display_dirty:
        return cpu, None
    machine, display = consume_display(cpu.machine)
    return cpu.replace(machine=machine), display_to_rgb(display, scale, *create_color_scheme(color_scheme))


def save_frame(frame: np.ndarray, filename: str) -> None:
    """Write an RGB frame to an image file (format chosen from the extension)."""
    Image.fromarray(frame).save(filename)
