from __future__ import annotations
from pathlib import Path

APP_NAME = "ImageResizer"
LOGGER_NAME = "image_resizer"

# UI sanity bound for target canvas size (pixels per side)
MIN_DIMENSION = 1
MAX_DIMENSION = 8000

DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 628
DEFAULT_BACKGROUND_COLOR = "#ffffff"

# canvas-style 0..1 quality, used for JPEG and WEBP only
LOSSY_QUALITY = 0.92

FALLBACK_BASENAME = "image"

PREVIEW_BORDER_COLOR = (160, 160, 160, 255)

PRESETS_STORAGE_KEY = "image-resizer-presets"
STORAGE_PATH = Path.home() / ".image_resizer_storage.json"

LOG_DIR = Path("logs")
LOG_FILE = LOG_DIR / "app.log"
