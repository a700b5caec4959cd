import json
from pathlib import Path

from resizer.config import PRESETS_STORAGE_KEY
from resizer.models.enums import BackgroundMode, ExportFormat, FitMode
from resizer.models.preset import Preset
from resizer.models.spec import TargetSpec
from resizer.storage.kv_store import JsonFileStore, MemoryStore
from resizer.storage.preset_store import PresetStore

SOCIAL_1 = TargetSpec(width=1200, height=628)
SOCIAL_2 = TargetSpec(width=1080, height=1080, format=ExportFormat.JPEG, fit_mode=FitMode.FILL,
                      background_mode=BackgroundMode.COLOR, background_color="#102030")


class BrokenStore:
    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("quota exceeded")


def _stored(store: MemoryStore):
    return json.loads(store.get(PRESETS_STORAGE_KEY))


def test_save_same_name_replaces_in_place():
    store = MemoryStore()
    ps = PresetStore(store)
    ps.save("Banner", TargetSpec(width=728, height=90))
    ps.save("Social", SOCIAL_1)
    ps.save("Story", TargetSpec(width=1080, height=1920))
    ps.save("Social", SOCIAL_2)

    assert ps.presets.names == ["Banner", "Social", "Story"]
    social = ps.presets[1]
    assert (social.width, social.height, social.format) == (1080, 1080, ExportFormat.JPEG)
    assert [p["name"] for p in _stored(store)] == ["Banner", "Social", "Story"]


def test_save_trims_name_and_ignores_blank():
    ps = PresetStore(MemoryStore())
    ps.save("   ", SOCIAL_1)
    ps.save("", SOCIAL_1)
    assert len(ps.presets) == 0

    ps.save("  Social  ", SOCIAL_1)
    ps.save("Social", SOCIAL_2)
    assert ps.presets.names == ["Social"]


def test_names_are_case_sensitive():
    ps = PresetStore(MemoryStore())
    ps.save("social", SOCIAL_1)
    ps.save("Social", SOCIAL_2)
    assert ps.presets.names == ["social", "Social"]


def test_delete_missing_name_is_noop():
    ps = PresetStore(MemoryStore())
    ps.save("Social", SOCIAL_1)
    before = ps.presets.copy()
    ps.delete("Nope")
    assert ps.presets == before


def test_delete_removes_and_persists():
    store = MemoryStore()
    ps = PresetStore(store)
    ps.save("A", SOCIAL_1)
    ps.save("B", SOCIAL_2)
    ps.delete("A")
    assert ps.presets.names == ["B"]
    assert [p["name"] for p in _stored(store)] == ["B"]


def test_delete_removes_whitespace_variants_from_legacy_data():
    legacy = [{"name": "Social ", "width": 10, "height": 10},
              {"name": "Social", "width": 20, "height": 20}]
    ps = PresetStore(MemoryStore({PRESETS_STORAGE_KEY: json.dumps(legacy)}))
    assert len(ps.load()) == 2
    ps.delete("Social")
    assert len(ps.presets) == 0


def test_load_corrupt_storage_gives_empty():
    for raw in ["{not json", '{"name": "x"}', "42", "null"]:
        ps = PresetStore(MemoryStore({PRESETS_STORAGE_KEY: raw}))
        assert len(ps.load()) == 0


def test_load_missing_key_gives_empty():
    assert len(PresetStore(MemoryStore()).load()) == 0


def test_load_skips_unusable_entries():
    raw = json.dumps([{"name": "ok", "width": 5, "height": 6}, "junk", {"width": 1}, {"name": "  "}])
    ps = PresetStore(MemoryStore({PRESETS_STORAGE_KEY: raw}))
    assert ps.load().names == ["ok"]


def test_broken_storage_degrades_to_memory():
    ps = PresetStore(BrokenStore())
    assert len(ps.load()) == 0
    ps.save("Social", SOCIAL_1)
    assert ps.presets.names == ["Social"]
    ps.delete("Social")
    assert len(ps.presets) == 0


def test_save_then_apply_round_trip():
    ps = PresetStore(MemoryStore())
    ps.save("Social", SOCIAL_2)
    assert ps.apply(ps.presets.get("Social")) == SOCIAL_2


def test_round_trip_through_storage(tmp_path: Path):
    path = tmp_path / "storage.json"
    PresetStore(JsonFileStore(path)).save("Social", SOCIAL_2)

    reloaded = PresetStore(JsonFileStore(path))
    reloaded.load()
    assert reloaded.apply(reloaded.presets.get("Social")) == SOCIAL_2


def test_apply_legacy_record_fills_defaults():
    spec = PresetStore(MemoryStore()).apply({"name": "Old", "width": 640, "height": 480})
    assert spec == TargetSpec(width=640, height=480, format=ExportFormat.PNG, fit_mode=FitMode.FIT,
                              background_mode=BackgroundMode.TRANSPARENT, background_color="#ffffff")


def test_apply_legacy_record_keeps_present_fields():
    record = {"name": "Old", "width": 9000, "height": "300", "format": "image/webp",
              "aspectMode": "fill", "backgroundMode": "color", "backgroundColor": "#abcdef"}
    spec = PresetStore(MemoryStore()).apply(record)
    assert (spec.width, spec.height) == (8000, 300)
    assert spec.format is ExportFormat.WEBP
    assert spec.fit_mode is FitMode.FILL
    assert spec.background_mode is BackgroundMode.COLOR
    assert spec.background_color == "#abcdef"


def test_apply_none_is_noop():
    assert PresetStore(MemoryStore()).apply(None) is None


def test_stored_schema():
    store = MemoryStore()
    PresetStore(store).save("Social", SOCIAL_2)
    assert _stored(store) == [{
        "name": "Social", "width": 1080, "height": 1080, "format": "image/jpeg",
        "aspectMode": "fill", "backgroundMode": "color", "backgroundColor": "#102030",
    }]
    assert Preset.from_spec("Social", SOCIAL_2).to_dict() == _stored(store)[0]
