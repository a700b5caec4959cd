from __future__ import annotations
from enum import Enum
from typing import Optional

class FitMode(Enum):
    FIT = "fit"    # keep aspect ratio, letterbox inside target
    FILL = "fill"  # keep aspect ratio, cover target then crop center

class BackgroundMode(Enum):
    TRANSPARENT = "transparent"
    COLOR = "color"

class ExportFormat(Enum):
    PNG = "image/png"
    JPEG = "image/jpeg"
    WEBP = "image/webp"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def pil_format(self) -> str:
        return self.name

    @property
    def is_lossy(self) -> bool:
        return self in (ExportFormat.JPEG, ExportFormat.WEBP)

    @property
    def has_alpha(self) -> bool:
        return self is not ExportFormat.JPEG

    @classmethod
    def parse(cls, value) -> Optional["ExportFormat"]:
        """Accept an ExportFormat, a MIME type or a short name ("png", "jpg"...)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        return _ALIASES.get(key)

_LABELS = {
    ExportFormat.PNG: "PNG",
    ExportFormat.JPEG: "JPG",
    ExportFormat.WEBP: "WEBP",
}

_ALIASES = {
    "image/png": ExportFormat.PNG,
    "png": ExportFormat.PNG,
    "image/jpeg": ExportFormat.JPEG,
    "image/jpg": ExportFormat.JPEG,
    "jpeg": ExportFormat.JPEG,
    "jpg": ExportFormat.JPEG,
    "image/webp": ExportFormat.WEBP,
    "webp": ExportFormat.WEBP,
}


def parse_enum(enum_cls, value, default):
    """Look up an enum member by value or name, falling back to ``default``."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip()
        for member in enum_cls:
            if key.lower() in (member.value, member.name.lower()):
                return member
    return default
