from __future__ import annotations
import json
import logging
from dataclasses import asdict, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from shifter.models.settings import (
    NumberFloorPolicy,
    ShifterSettings,
    SortCaseMode,
    TimestampUnit,
)

logger = logging.getLogger(__name__)

_ENUM_FIELDS = {
    "sort_case_mode": SortCaseMode,
    "timestamp_unit": TimestampUnit,
    "number_floor": NumberFloorPolicy,
}


class SettingsService:
    """Simple JSON-backed store of shifter preferences.

    Notes:
        - The shift core never writes here; it only receives ``snapshot()``.
        - Unknown keys and unreadable values fall back to factory defaults.
        - An empty dictionary text restores the default terms on load.
    """

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self.storage_path = storage_path or (Path.home() / "shifter_settings.json")
        self._settings = ShifterSettings()
        self.load()

    # ---------- Persistence ----------
    def load(self) -> None:
        if not self.storage_path.exists():
            self._settings = ShifterSettings()
            return
        try:
            data = json.loads(self.storage_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read settings from %s: %s", self.storage_path, exc)
            data = {}
        self._settings = self._from_dict(data if isinstance(data, dict) else {})

    def save(self) -> None:
        payload = {
            key: (value.value if isinstance(value, Enum) else value)
            for key, value in asdict(self._settings).items()
        }
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            self.storage_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            # Best-effort; the in-memory snapshot stays valid
            logger.warning("Could not persist settings to %s: %s", self.storage_path, exc)

    # ---------- Access ----------
    def snapshot(self) -> ShifterSettings:
        return self._settings

    def update(self, **changes: Any) -> ShifterSettings:
        data = asdict(self._settings)
        data.update(changes)
        self._settings = self._from_dict(data)
        self.save()
        return self._settings

    def reset_defaults(self) -> ShifterSettings:
        self._settings = ShifterSettings()
        self.save()
        return self._settings

    @staticmethod
    def _from_dict(data: Dict[str, Any]) -> ShifterSettings:
        defaults = ShifterSettings()
        values: Dict[str, Any] = {}
        for key, enum_type in _ENUM_FIELDS.items():
            raw = data.get(key, getattr(defaults, key))
            try:
                values[key] = raw if isinstance(raw, enum_type) else enum_type(raw)
            except ValueError:
                values[key] = getattr(defaults, key)
        try:
            values["shift_more_size"] = int(data.get("shift_more_size", defaults.shift_more_size))
        except (TypeError, ValueError):
            values["shift_more_size"] = defaults.shift_more_size
        values["preserve_case"] = bool(data.get("preserve_case", defaults.preserve_case))
        terms = data.get("dictionary_terms")
        values["dictionary_terms"] = (
            terms if isinstance(terms, str) and terms.strip() else defaults.dictionary_terms
        )
        return replace(defaults, **values)
