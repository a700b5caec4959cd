from __future__ import annotations
import math
from typing import Optional, Tuple

from .compositor import RasterSurface

Size = Tuple[float, float]


def pointer_to_pixel(x: float, y: float, surface_size: Tuple[int, int],
                     displayed_size: Size) -> Tuple[int, int]:
    """
    Map a pointer position in displayed (on-screen) coordinates to a surface pixel index.
    The ratio surface/displayed covers both pixel density and any scaling of the widget.
    """
    sw, sh = surface_size
    dw, dh = displayed_size
    dw = dw if dw and dw > 0 else sw
    dh = dh if dh and dh > 0 else sh
    ix = math.floor(x * sw / dw)
    iy = math.floor(y * sh / dh)
    return (min(max(ix, 0), sw - 1), min(max(iy, 0), sh - 1))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def sample_color(surface: RasterSurface, x: float, y: float,
                 displayed_size: Optional[Size] = None) -> str:
    """Color under the pointer as ``#rrggbb``; alpha is dropped."""
    if displayed_size is None:
        displayed_size = (surface.width, surface.height)
    ix, iy = pointer_to_pixel(x, y, surface.pixel_size, displayed_size)
    im = surface.image
    if im.mode != "RGBA":
        im = im.convert("RGBA")
    r, g, b, _a = im.getpixel((ix, iy))
    return rgb_to_hex(r, g, b)
