from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
from kanto.core.errors import ValidationError
from kanto.core.logging import logger

SETTINGS_FILENAME = ".kanto_settings.json"
LOG_LEVELS = {"DEBUG","INFO","WARN","ERROR"}

@dataclass
class SettingsData:
    text_speed: int = 2                   # 1 fast, 2 normal, 3 slow (CLI message pacing)
    log_level: str = "INFO"               # DEBUG / INFO / WARN / ERROR
    debug: bool = False                   # Verbose engine logging
    message_window: int = 6               # Log lines shown by the battle panel
    trainer_exp_bonus: float = 1.5        # EXP multiplier for non-wild battles
    whiteout_penalty_percent: int = 25    # Share of the trainer reward lost on whiteout

    def normalize(self):
        if self.text_speed not in {1,2,3}:
            self.text_speed = 2
        if self.log_level not in LOG_LEVELS:
            self.log_level = "INFO"
        if self.debug:
            self.log_level = "DEBUG"
        if not isinstance(self.message_window, int) or self.message_window < 1:
            self.message_window = 6
        try:
            self.trainer_exp_bonus = float(self.trainer_exp_bonus)
        except (TypeError, ValueError):
            self.trainer_exp_bonus = 1.5
        if self.trainer_exp_bonus <= 0:
            self.trainer_exp_bonus = 1.5
        if not isinstance(self.whiteout_penalty_percent, int) or not 0 <= self.whiteout_penalty_percent <= 100:
            self.whiteout_penalty_percent = 25

    @property
    def text_delay(self) -> float:
        return {1: 0.0, 2: 0.35, 3: 0.8}[self.text_speed]

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def apply_logging(self):
        lvl: str = self.data.log_level
        if lvl in LOG_LEVELS:
            logger.set_level(lvl)  # type: ignore[arg-type]

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def update(self, **changes):
        field_names = {f.name for f in fields(SettingsData)}
        for k, v in changes.items():
            if k not in field_names:
                raise ValidationError(f"Unknown setting: {k}")
            setattr(self.data, k, v)
        self.data.normalize()
        self.apply_logging()
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
