from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from resizer.config import DEFAULT_BACKGROUND_COLOR
from .enums import BackgroundMode, ExportFormat, FitMode
from .spec import TargetSpec, clamp_dimension


@dataclass(frozen=True)
class Preset:
    name: str
    width: int
    height: int
    format: ExportFormat = ExportFormat.PNG
    fit_mode: FitMode = FitMode.FIT
    background_mode: BackgroundMode = BackgroundMode.TRANSPARENT
    background_color: str = DEFAULT_BACKGROUND_COLOR

    @classmethod
    def from_spec(cls, name: str, spec: TargetSpec) -> "Preset":
        return cls(
            name=name,
            width=clamp_dimension(spec.width),
            height=clamp_dimension(spec.height),
            format=spec.format,
            fit_mode=spec.fit_mode,
            background_mode=spec.background_mode,
            background_color=spec.background_color,
        )

    def to_dict(self) -> Dict[str, Any]:
        # camelCase keys are the stored schema; older stores used the same keys
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "format": self.format.value,
            "aspectMode": self.fit_mode.value,
            "backgroundMode": self.background_mode.value,
            "backgroundColor": self.background_color,
        }


def _key(name: str) -> str:
    return name.strip()


class PresetCollection:
    """Ordered presets, unique by trimmed name."""

    def __init__(self, items: Optional[List[Preset]] = None):
        self._items: List[Preset] = list(items or [])

    def __iter__(self) -> Iterator[Preset]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Preset:
        return self._items[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, PresetCollection):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"PresetCollection({self._items!r})"

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._items]

    def copy(self) -> "PresetCollection":
        return PresetCollection(self._items)

    def index_of(self, name: str) -> int:
        key = _key(name)
        for idx, item in enumerate(self._items):
            if _key(item.name) == key:
                return idx
        return -1

    def get(self, name: str) -> Optional[Preset]:
        idx = self.index_of(name)
        return self._items[idx] if idx >= 0 else None

    def upsert(self, preset: Preset) -> int:
        """Replace the preset with the same name in place, else append. Returns its index."""
        idx = self.index_of(preset.name)
        if idx >= 0:
            self._items[idx] = preset
            return idx
        self._items.append(preset)
        return len(self._items) - 1

    def remove(self, name: str) -> int:
        """Drop every preset matching ``name``; returns how many were removed."""
        key = _key(name)
        before = len(self._items)
        self._items = [p for p in self._items if _key(p.name) != key]
        return before - len(self._items)

    def to_list(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._items]
