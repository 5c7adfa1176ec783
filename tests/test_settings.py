"""Preferences file load/save."""
import json
from compressio.utils import settings as settings_mod
from compressio.utils.settings import DEFAULT_SETTINGS, load_settings, save_settings


def test_first_load_writes_defaults(tmp_path):
    p = tmp_path / "s.json"
    assert load_settings(p) == DEFAULT_SETTINGS
    assert json.loads(p.read_text()) == DEFAULT_SETTINGS


def test_stored_values_override_defaults(tmp_path):
    p = tmp_path / "s.json"
    p.write_text(json.dumps({"ffmpeg_path": "/usr/local/bin/ffmpeg", "auto_gpu": False}))
    s = load_settings(p)
    assert s["ffmpeg_path"] == "/usr/local/bin/ffmpeg"
    assert s["auto_gpu"] is False
    assert s["video_preset"] == DEFAULT_SETTINGS["video_preset"]


def test_corrupt_file_falls_back_to_defaults(tmp_path, caplog):
    p = tmp_path / "s.json"
    p.write_text("{not json")
    assert load_settings(p) == DEFAULT_SETTINGS
    assert "Could not read" in caplog.text
    assert p.read_text() == "{not json"


def test_non_object_json_ignored(tmp_path):
    p = tmp_path / "s.json"
    p.write_text("[1, 2]")
    assert load_settings(p) == DEFAULT_SETTINGS


def test_save_round_trip_uses_module_default_path(tmp_path, monkeypatch):
    p = tmp_path / "home.json"
    monkeypatch.setattr(settings_mod, "APP_SETTINGS_FILE", p)
    save_settings({**DEFAULT_SETTINGS, "log_level": "DEBUG"})
    assert load_settings()["log_level"] == "DEBUG"


def test_load_returns_a_copy(tmp_path):
    s = load_settings(tmp_path / "s.json")
    s["ffmpeg_path"] = "changed"
    assert DEFAULT_SETTINGS["ffmpeg_path"] == "ffmpeg"
