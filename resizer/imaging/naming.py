from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

from resizer.config import FALLBACK_BASENAME, LOGGER_NAME
from resizer.models.enums import ExportFormat

log = logging.getLogger(f"{LOGGER_NAME}.naming")

_EXTENSIONS = {
    ExportFormat.PNG: "png",
    ExportFormat.JPEG: "jpg",
    ExportFormat.WEBP: "webp",
}


def format_extension(fmt: Union[ExportFormat, str, None]) -> str:
    parsed = ExportFormat.parse(fmt)
    return _EXTENSIONS.get(parsed, "img") if parsed else "img"


def _base_name(source_name: Optional[str]) -> str:
    name = source_name or FALLBACK_BASENAME
    stem, dot, ext = name.rpartition(".")
    # only the last extension goes: "a.tar.gz" -> "a.tar", ".png" -> fallback
    base = stem if dot and ext else name
    return base or FALLBACK_BASENAME


def export_filename(source_name: Optional[str], width: int, height: int,
                    fmt: Union[ExportFormat, str, None]) -> str:
    return f"{_base_name(source_name)}-{width}x{height}.{format_extension(fmt)}"


def write_export(data: bytes, filename: str, directory: str | Path) -> Path:
    """Write ``data`` under ``directory``, never overwriting an existing file."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / filename
    stem, suffix = out.stem, out.suffix
    i = 1
    while out.exists():
        out = out_dir / f"{stem}-{i}{suffix}"
        i += 1
    out.write_bytes(data)
    log.info("Saved %s", out)
    return out
