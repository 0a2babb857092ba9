import json

from shifter.models.settings import (
    DEFAULT_TERMS,
    NumberFloorPolicy,
    ShifterSettings,
    SortCaseMode,
    TimestampUnit,
)
from shifter.services.settings_service import SettingsService


def test_defaults_when_file_missing(tmp_path):
    svc = SettingsService(tmp_path / "settings.json")
    s = svc.snapshot()
    assert s == ShifterSettings()
    assert s.sort_case_mode is SortCaseMode.CASE_INSENSITIVE
    assert s.shift_more_size == 10
    assert s.timestamp_unit is TimestampUnit.SECONDS
    assert not s.preserve_case


def test_update_persists_and_reloads(tmp_path):
    path = tmp_path / "settings.json"
    svc = SettingsService(path)
    svc.update(sort_case_mode="case_sensitive", shift_more_size=25, preserve_case=True)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sort_case_mode"] == "case_sensitive"
    assert data["shift_more_size"] == 25

    reloaded = SettingsService(path).snapshot()
    assert reloaded.case_sensitive_sort
    assert reloaded.shift_more_size == 25
    assert reloaded.preserve_case


def test_shift_more_size_is_clamped(tmp_path):
    svc = SettingsService(tmp_path / "settings.json")
    assert svc.update(shift_more_size=1).shift_more_size == 2
    assert svc.update(shift_more_size=5000).shift_more_size == 999
    assert ShifterSettings(shift_more_size=0).shift_more_size == 2


def test_unreadable_file_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{nope", encoding="utf-8")
    svc = SettingsService(path)
    assert svc.snapshot() == ShifterSettings()
    assert "Could not read settings" in caplog.text


def test_invalid_values_fall_back_per_field(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "timestamp_unit": "fortnights",
                "number_floor": "clamp",
                "shift_more_size": "lots",
                "dictionary_terms": "   ",
            }
        ),
        encoding="utf-8",
    )
    s = SettingsService(path).snapshot()
    assert s.timestamp_unit is TimestampUnit.SECONDS
    assert s.number_floor is NumberFloorPolicy.CLAMP
    assert s.shift_more_size == 10
    assert s.dictionary_terms == DEFAULT_TERMS


def test_reset_defaults(tmp_path):
    path = tmp_path / "settings.json"
    svc = SettingsService(path)
    svc.update(dictionary_terms="|ping|pong|")
    assert svc.snapshot().dictionary_terms == "|ping|pong|"
    svc.reset_defaults()
    assert svc.snapshot() == ShifterSettings()
    assert SettingsService(path).snapshot().dictionary_terms == DEFAULT_TERMS


def test_snapshot_is_immutable(tmp_path):
    svc = SettingsService(tmp_path / "settings.json")
    snapshot = svc.snapshot()
    svc.update(preserve_case=True)
    assert snapshot.preserve_case is False
