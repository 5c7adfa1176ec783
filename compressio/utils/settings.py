# compressio/utils/settings.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

APP_SETTINGS_FILE = Path.home() / ".compress_io_settings.json"

DEFAULT_SETTINGS = {
    "ffmpeg_path": "ffmpeg",
    "video_preset": "superfast",
    "output_suffix": "_compressed",
    "auto_gpu": True,             # default GPU hint for new video jobs

    # Logging
    "write_log_file": False,      # append ffmpeg output to <output>.log
    "log_level": "INFO",
    # layout persistence:
    # "window_geometry": [x, y, w, h],
}

VIDEO_PRESETS = ["ultrafast", "superfast", "veryfast", "faster", "fast", "medium", "slow", "slower", "veryslow"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def load_settings(path: Path | None = None) -> dict:
    p = path or APP_SETTINGS_FILE
    if p.exists():
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return {**DEFAULT_SETTINGS, **data}
            logger.warning("Ignoring %s: expected a JSON object", p)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s (%s); using defaults", p, e)
        return DEFAULT_SETTINGS.copy()
    # First run → write defaults so the file exists
    save_settings(DEFAULT_SETTINGS, p)
    return DEFAULT_SETTINGS.copy()


def save_settings(data: dict, path: Path | None = None) -> None:
    p = path or APP_SETTINGS_FILE
    try:
        p.write_text(json.dumps(data, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not save settings to %s: %s", p, e)
