# resizer/storage/preset_store.py
# Purpose: named presets of the target spec, persisted as a JSON array under one key.
# Persistence is best effort: read/write failures are logged and the collection
# keeps working in memory for the rest of the session.

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

from resizer.config import DEFAULT_BACKGROUND_COLOR, LOGGER_NAME, PRESETS_STORAGE_KEY
from resizer.models.enums import BackgroundMode, ExportFormat, FitMode, parse_enum
from resizer.models.preset import Preset, PresetCollection
from resizer.models.spec import TargetSpec, clamp_dimension

log = logging.getLogger(f"{LOGGER_NAME}.presets")

PresetLike = Union[Preset, Mapping[str, Any]]


def _field(record: Mapping[str, Any], *keys: str):
    for k in keys:
        if k in record and record[k] is not None and record[k] != "":
            return record[k]
    return None


def spec_from_record(record: PresetLike) -> TargetSpec:
    """
    Build a TargetSpec from a preset. Mappings may come from older stores that lack
    newer fields; each missing (or unknown) field takes its default.
    """
    if isinstance(record, Preset):
        return TargetSpec(
            width=clamp_dimension(record.width),
            height=clamp_dimension(record.height),
            format=record.format,
            fit_mode=record.fit_mode,
            background_mode=record.background_mode,
            background_color=record.background_color or DEFAULT_BACKGROUND_COLOR,
        )

    fmt = ExportFormat.parse(_field(record, "format")) or ExportFormat.PNG
    return TargetSpec(
        width=clamp_dimension(_field(record, "width")),
        height=clamp_dimension(_field(record, "height")),
        format=fmt,
        fit_mode=parse_enum(FitMode, _field(record, "aspectMode", "fit_mode"), FitMode.FIT),
        background_mode=parse_enum(
            BackgroundMode, _field(record, "backgroundMode", "background_mode"),
            BackgroundMode.TRANSPARENT,
        ),
        background_color=str(
            _field(record, "backgroundColor", "background_color") or DEFAULT_BACKGROUND_COLOR
        ),
    )


def preset_from_record(record: Mapping[str, Any]) -> Optional[Preset]:
    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    spec = spec_from_record(record)
    return Preset.from_spec(name, spec)


class PresetStore:
    def __init__(self, store, key: str = PRESETS_STORAGE_KEY):
        self.store = store
        self.key = key
        self.presets = PresetCollection()

    # ---------------------- persistence ----------------------
    def load(self) -> PresetCollection:
        """Read presets from storage. Missing or corrupt data yields an empty collection."""
        self.presets = PresetCollection()
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError, TypeError) as e:
            log.warning("Could not read presets: %s", e)
            return self.presets
        if not raw:
            return self.presets

        try:
            parsed = json.loads(raw)
        except (ValueError, TypeError) as e:
            log.warning("Ignoring corrupt preset data: %s", e)
            return self.presets
        if not isinstance(parsed, list):
            log.warning("Ignoring preset data that is not a list (%s)", type(parsed).__name__)
            return self.presets

        items = []
        for item in parsed:
            preset = preset_from_record(item) if isinstance(item, Mapping) else None
            if preset is None:
                log.warning("Skipping unusable preset entry: %r", item)
                continue
            items.append(preset)
        # legacy duplicates (names differing only by whitespace) are kept as stored
        self.presets = PresetCollection(items)
        log.info("Loaded %d preset(s)", len(self.presets))
        return self.presets

    def _persist(self) -> None:
        try:
            self.store.set(self.key, json.dumps(self.presets.to_list()))
        except (OSError, ValueError, TypeError) as e:
            log.warning("Could not save presets, keeping them in memory only: %s", e)

    # ---------------------- operations ----------------------
    def save(self, name: str, spec: TargetSpec) -> PresetCollection:
        key = (name or "").strip()
        if not key:
            return self.presets
        idx = self.presets.upsert(Preset.from_spec(key, spec))
        log.info("Saved preset '%s' at position %d", key, idx)
        self._persist()
        return self.presets

    def apply(self, preset: Optional[PresetLike]) -> Optional[TargetSpec]:
        if preset is None:
            return None
        return spec_from_record(preset)

    def delete(self, name: str) -> PresetCollection:
        removed = self.presets.remove(name or "")
        if removed:
            log.info("Deleted preset '%s'", name)
        self._persist()
        return self.presets
