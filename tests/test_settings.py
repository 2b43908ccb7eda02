import json
import pytest

from kanto.core.errors import ValidationError
from kanto.core.logging import logger
from kanto.system.settings import Settings, SettingsData


def test_missing_file_gives_defaults(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    assert s.data == SettingsData()
    assert s.data.message_window == 6


def test_partial_and_invalid_values_are_normalized(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"text_speed": 9, "message_window": 0, "legacy_key": True}), encoding="utf-8")
    s = Settings.load(path)
    assert s.data.text_speed == 2
    assert s.data.message_window == 6


def test_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{oops", encoding="utf-8")
    assert Settings.load(path).data == SettingsData()


def test_save_and_reload(tmp_path):
    path = tmp_path / "settings.json"
    s = Settings.load(path)
    s.update(whiteout_penalty_percent=50, text_speed=1)
    s.save()
    again = Settings.load(path)
    assert again.data.whiteout_penalty_percent == 50
    assert again.data.text_delay == 0.0


def test_update_rejects_unknown_key_and_notifies(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    seen = []
    s.on_change(lambda d: seen.append(d.log_level))
    with pytest.raises(ValidationError):
        s.update(volume=3)
    s.update(debug=True)
    assert seen == ["DEBUG"]
    assert logger.enabled("DEBUG")
    s.update(debug=False, log_level="INFO")
    assert not logger.enabled("DEBUG")
