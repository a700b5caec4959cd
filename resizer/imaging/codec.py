# resizer/imaging/codec.py
# Purpose: the two edges of the compositor - decoding raw bytes into a SourceImage
# and encoding a rendered surface into PNG / JPEG / WEBP bytes.

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from resizer.config import FALLBACK_BASENAME, LOGGER_NAME, LOSSY_QUALITY
from resizer.models.enums import ExportFormat
from .compositor import RasterSurface, SourceImage

log = logging.getLogger(f"{LOGGER_NAME}.codec")


# ---------------------------- decode ----------------------------
def decode_image(data: bytes, name: str = FALLBACK_BASENAME) -> Optional[SourceImage]:
    """Decode any Pillow-readable raster. Returns None when the bytes are not an image."""
    if not data:
        log.warning("Nothing to decode for %s", name)
        return None
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            rgba = im.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        log.warning("Could not decode %s: %s", name, e)
        return None

    if rgba.width <= 0 or rgba.height <= 0:
        log.warning("Decoded %s has invalid dimensions: %dx%d", name, rgba.width, rgba.height)
        return None

    log.info("Loaded %s (%dx%d)", name, rgba.width, rgba.height)
    return SourceImage(image=rgba, name=name or FALLBACK_BASENAME)


def load_image_file(path: str | Path) -> Optional[SourceImage]:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        log.warning("Could not read %s: %s", p, e)
        return None
    return decode_image(data, p.name)


# ---------------------------- encode ----------------------------
def _flatten_on_black(im: Image.Image) -> Image.Image:
    # formats without alpha see transparent pixels as black, like a browser canvas
    base = Image.new("RGBA", im.size, (0, 0, 0, 255))
    base.alpha_composite(im.convert("RGBA"))
    return base.convert("RGB")


def encode_surface(surface: RasterSurface, fmt: ExportFormat,
                   quality: Optional[float] = None) -> Optional[bytes]:
    """
    Encode ``surface`` as ``fmt``. ``quality`` is on a 0..1 scale and only applies
    to lossy formats (defaults to LOSSY_QUALITY). Returns None when encoding fails.
    """
    im = surface.image
    params = {}
    if fmt.is_lossy:
        q = LOSSY_QUALITY if quality is None else quality
        params["quality"] = max(0, min(100, int(round(q * 100))))
    if not fmt.has_alpha:
        im = _flatten_on_black(im)

    buf = io.BytesIO()
    try:
        im.save(buf, format=fmt.pil_format, **params)
    except (OSError, ValueError, KeyError) as e:
        log.error("Encoding %s failed: %s", fmt.label, e)
        return None

    data = buf.getvalue()
    if not data:
        log.error("Encoder produced no data for %s", fmt.label)
        return None
    log.info("Encoded %dx%d %s (%d bytes)", im.width, im.height, fmt.label, len(data))
    return data
