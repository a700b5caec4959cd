from __future__ import annotations
from pathlib import Path
from PySide6.QtCore import QThread, Signal
from resizer.imaging.codec import encode_surface, load_image_file
from resizer.imaging.compositor import RasterSurface
from resizer.imaging.naming import write_export
from resizer.models.enums import ExportFormat

class DecodeWorker(QThread):
    """Reads and decodes one image file; emits (token, SourceImage or None)."""
    decoded = Signal(int, object)

    def __init__(self, token: int, path: str | Path, parent=None):
        super().__init__(parent)
        self._token = token
        self._path = Path(path)

    def run(self):
        self.decoded.emit(self._token, load_image_file(self._path))

class EncodeWorker(QThread):
    """Encodes an export surface and writes it; emits the written path, or "" when nothing was written."""
    finished_export = Signal(str)
    error = Signal(str)

    def __init__(self, surface: RasterSurface, fmt: ExportFormat, filename: str,
                 directory: str | Path, parent=None):
        super().__init__(parent)
        self._surface = surface
        self._fmt = fmt
        self._filename = filename
        self._directory = Path(directory)

    def run(self):
        data = encode_surface(self._surface, self._fmt)
        if data is None:
            self.finished_export.emit("")
            return
        try:
            out = write_export(data, self._filename, self._directory)
        except OSError as e:
            self.error.emit(f"{self._filename}: {e}")
            return
        self.finished_export.emit(str(out))
