# resizer/imaging/compositor.py
# Purpose: fit a source image into an arbitrary target canvas (FIT / FILL),
# composite it over a transparent or solid background, and hand back the bitmap.
# Preview renders are density-scaled and carry a 1px boundary; export renders
# are exactly width x height pixels with no boundary.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageColor, ImageDraw

from resizer.config import DEFAULT_BACKGROUND_COLOR, LOGGER_NAME, PREVIEW_BORDER_COLOR
from resizer.models.enums import BackgroundMode, FitMode
from resizer.models.spec import TargetSpec

log = logging.getLogger(f"{LOGGER_NAME}.compositor")

RESAMPLE = Image.Resampling.LANCZOS
# float slack so exact pixel edges do not spill into the neighbour
_EDGE_EPS = 1e-6


# ---------------------------- data ----------------------------
@dataclass(frozen=True)
class SourceImage:
    image: Image.Image
    name: str = "image"

    @property
    def natural_width(self) -> int:
        return self.image.width

    @property
    def natural_height(self) -> int:
        return self.image.height


@dataclass(frozen=True)
class Placement:
    scale: float
    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class RasterSurface:
    """
    A rendered bitmap plus the clamped spec and density it was rendered with.
    ``image`` holds the composited pixels only; preview renders also carry ``display``,
    the same pixels with the boundary drawn on top.
    """
    image: Image.Image
    spec: TargetSpec
    pixel_density: float = 1.0
    placement: Optional[Placement] = None
    display: Optional[Image.Image] = None

    @property
    def width(self) -> int:
        """Logical width (target pixels)."""
        return int(self.spec.width)

    @property
    def height(self) -> int:
        return int(self.spec.height)

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def display_image(self) -> Image.Image:
        return self.display if self.display is not None else self.image


# ---------------------------- geometry ----------------------------
def fit_placement(src_w: float, src_h: float, width: float, height: float,
                  fit_mode: FitMode = FitMode.FIT) -> Placement:
    """
    Uniform scale and centered offset of a src_w x src_h image inside width x height.
    FIT picks the smaller ratio (whole image visible), FILL the larger one (target covered,
    overflow cropped equally on both sides, so offsets go negative).
    """
    scale_fit = min(width / src_w, height / src_h)
    scale_fill = max(width / src_w, height / src_h)
    scale = scale_fill if fit_mode is FitMode.FILL else scale_fit

    draw_w = src_w * scale
    draw_h = src_h * scale
    return Placement(
        scale=scale,
        draw_width=draw_w,
        draw_height=draw_h,
        offset_x=(width - draw_w) / 2,
        offset_y=(height - draw_h) / 2,
    )


def _surface_px(logical: int, density: float) -> int:
    return max(1, int(round(logical * density)))


def _parse_color(value: str) -> Tuple[int, int, int, int]:
    try:
        r, g, b = ImageColor.getrgb(value or DEFAULT_BACKGROUND_COLOR)[:3]
    except ValueError:
        log.warning("Unparseable background color %r, using %s", value, DEFAULT_BACKGROUND_COLOR)
        r, g, b = ImageColor.getrgb(DEFAULT_BACKGROUND_COLOR)[:3]
    return (r, g, b, 255)


def _pixel_span(start: float, end: float, limit: int) -> Tuple[int, int]:
    lo = math.floor(start + _EDGE_EPS)
    hi = math.ceil(end - _EDGE_EPS)
    if hi <= lo:
        hi = lo + 1
    return max(0, lo), min(limit, hi)


def _draw_source(surface: Image.Image, src: Image.Image, place: Placement,
                 kx: float, ky: float) -> None:
    """Resample only the part of ``src`` that lands inside the surface, then composite it."""
    x0 = place.offset_x * kx
    y0 = place.offset_y * ky
    x1 = (place.offset_x + place.draw_width) * kx
    y1 = (place.offset_y + place.draw_height) * ky

    # cover every pixel the placement touches, and at least one per axis
    cx0, cx1 = _pixel_span(x0, x1, surface.width)
    cy0, cy1 = _pixel_span(y0, y1, surface.height)
    if cx1 <= cx0 or cy1 <= cy0:
        return

    sx = src.width / (x1 - x0)
    sy = src.height / (y1 - y0)
    box = (
        max(0.0, (cx0 - x0) * sx),
        max(0.0, (cy0 - y0) * sy),
        min(float(src.width), (cx1 - x0) * sx),
        min(float(src.height), (cy1 - y0) * sy),
    )
    patch = src.resize((cx1 - cx0, cy1 - cy0), resample=RESAMPLE, box=box)
    surface.alpha_composite(patch, dest=(cx0, cy0))


# ---------------------------- public API ----------------------------
def render(source: Optional[SourceImage], spec: TargetSpec,
           pixel_density: float = 1.0, for_export: bool = False) -> RasterSurface:
    """
    Render ``source`` into a canvas described by ``spec``.

    The returned surface carries the clamped spec; callers feed ``surface.spec``
    back into their state so what is shown matches what was rendered.
    """
    nat_w = source.natural_width if source else 0
    nat_h = source.natural_height if source else 0
    spec = spec.resolved(nat_w, nat_h)
    width, height = int(spec.width), int(spec.height)

    if not pixel_density or pixel_density <= 0:
        pixel_density = 1.0
    px_w, px_h = _surface_px(width, pixel_density), _surface_px(height, pixel_density)
    kx, ky = px_w / width, px_h / height

    surface = Image.new("RGBA", (px_w, px_h), (0, 0, 0, 0))
    if spec.background_mode is BackgroundMode.COLOR:
        surface.paste(_parse_color(spec.background_color), (0, 0, px_w, px_h))

    placement = None
    if source is not None and nat_w and nat_h:
        src = source.image if source.image.mode == "RGBA" else source.image.convert("RGBA")
        placement = fit_placement(nat_w, nat_h, width, height, spec.fit_mode)
        _draw_source(surface, src, placement, kx, ky)

    display = None
    if not for_export:
        stroke = max(1, int(round(pixel_density)))
        display = surface.copy()
        ImageDraw.Draw(display).rectangle(
            (0, 0, px_w - 1, px_h - 1), outline=PREVIEW_BORDER_COLOR, width=stroke
        )

    log.debug(
        "Rendered %dx%d (%dx%d px, density %.2f, %s, export=%s)",
        width, height, px_w, px_h, pixel_density, spec.fit_mode.value, for_export,
    )
    return RasterSurface(image=surface, spec=spec, pixel_density=pixel_density, placement=placement,
                         display=display)


def render_for_export(source: Optional[SourceImage], spec: TargetSpec) -> RasterSurface:
    """Render at exactly width x height pixels, without the preview boundary."""
    return render(source, spec, pixel_density=1.0, for_export=True)
