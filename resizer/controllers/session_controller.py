from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from resizer.config import LOGGER_NAME
from resizer.imaging.codec import decode_image, encode_surface, load_image_file
from resizer.imaging.compositor import RasterSurface, SourceImage, render, render_for_export
from resizer.imaging.naming import export_filename, write_export
from resizer.imaging.sampler import sample_color
from resizer.models.enums import BackgroundMode
from resizer.models.preset import Preset, PresetCollection
from resizer.models.spec import TargetSpec, clamp_dimension
from resizer.storage.preset_store import PresetLike, PresetStore

log = logging.getLogger(f"{LOGGER_NAME}.session")

RenderListener = Callable[[RasterSurface], None]


@dataclass(frozen=True)
class ExportResult:
    filename: str
    data: bytes
    surface: RasterSurface


class ResizerSession:
    """
    Owns the editing state (source, target spec, eyedropper flag, presets) and
    re-renders the preview synchronously after every change while an image is loaded.
    """

    def __init__(self, store, pixel_density: float = 1.0, spec: Optional[TargetSpec] = None):
        self.presets_store = PresetStore(store)
        self.pixel_density = pixel_density
        self.spec = spec or TargetSpec()
        self.source: Optional[SourceImage] = None
        self.picking_color = False
        self.surface: Optional[RasterSurface] = None
        self._load_token = 0
        self._listeners: List[RenderListener] = []
        self.presets_store.load()

    # ---------------------- state ----------------------
    @property
    def image_loaded(self) -> bool:
        return self.source is not None

    @property
    def presets(self) -> PresetCollection:
        return self.presets_store.presets

    def add_render_listener(self, cb: RenderListener) -> None:
        self._listeners.append(cb)

    def render(self) -> RasterSurface:
        self.surface = render(self.source, self.spec, self.pixel_density, for_export=False)
        # an empty canvas must not pin unset dimensions before the first load
        if self.image_loaded or self.spec.has_dimensions:
            self.spec = self.surface.spec
        for cb in self._listeners:
            cb(self.surface)
        return self.surface

    def update(self, **fields) -> TargetSpec:
        """Set TargetSpec fields (width=..., fit_mode=...) and re-render if an image is loaded."""
        self.spec = self.spec.with_changes(**fields)
        if self.image_loaded:
            self.render()
        return self.spec

    def set_pixel_density(self, density: float) -> None:
        self.pixel_density = density if density and density > 0 else 1.0
        self.render()

    # ---------------------- loading ----------------------
    def begin_load(self) -> int:
        """Start a load; any load begun earlier becomes stale."""
        self._load_token += 1
        return self._load_token

    def finish_load(self, token: int, source: Optional[SourceImage]) -> bool:
        if token != self._load_token:
            log.info("Discarding superseded image load")
            return False
        if source is None:
            return False

        self.source = source
        if not self.spec.has_dimensions:
            self.spec = self.spec.with_changes(
                width=clamp_dimension(source.natural_width),
                height=clamp_dimension(source.natural_height),
            )
        self.picking_color = False
        self.render()
        return True

    def load_bytes(self, data: bytes, name: str = "image") -> bool:
        token = self.begin_load()
        return self.finish_load(token, decode_image(data, name))

    def load_file(self, path: Union[str, Path]) -> bool:
        token = self.begin_load()
        return self.finish_load(token, load_image_file(path))

    # ---------------------- eyedropper ----------------------
    def start_eyedropper(self) -> bool:
        if not self.image_loaded:
            return False
        self.picking_color = True
        return True

    def cancel_eyedropper(self) -> None:
        self.picking_color = False

    def pick_color(self, x: float, y: float,
                   displayed_size: Optional[Tuple[float, float]] = None) -> Optional[str]:
        if not self.picking_color or self.surface is None:
            return None
        color = sample_color(self.surface, x, y, displayed_size)
        self.picking_color = False
        log.info("Picked background color %s", color)
        self.update(background_color=color, background_mode=BackgroundMode.COLOR)
        return color

    # ---------------------- presets ----------------------
    def save_preset(self, name: str) -> PresetCollection:
        return self.presets_store.save(name, self.spec)

    def apply_preset(self, preset: Optional[PresetLike]) -> Optional[TargetSpec]:
        spec = self.presets_store.apply(preset)
        if spec is None:
            return None
        self.spec = spec
        self.picking_color = False
        self.render()
        return self.spec

    def delete_preset(self, preset: Union[Preset, str]) -> PresetCollection:
        name = preset.name if isinstance(preset, Preset) else preset
        return self.presets_store.delete(name)

    # ---------------------- export ----------------------
    def prepare_export(self) -> Optional[Tuple[RasterSurface, str]]:
        """Export-resolution render plus its download filename; encoding is left to the caller."""
        if not self.image_loaded:
            return None
        surface = render_for_export(self.source, self.spec)
        self.spec = surface.spec
        filename = export_filename(self.source.name, surface.width, surface.height, self.spec.format)
        return surface, filename

    def export(self) -> Optional[ExportResult]:
        prepared = self.prepare_export()
        if prepared is None:
            return None
        surface, filename = prepared
        data = encode_surface(surface, self.spec.format)
        if data is None:
            return None
        return ExportResult(filename=filename, data=data, surface=surface)

    def export_to(self, directory: Union[str, Path]) -> Optional[Path]:
        result = self.export()
        if result is None:
            return None
        return write_export(result.data, result.filename, directory)
