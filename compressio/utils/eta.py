# compressio/utils/eta.py
from ..models.job import Progress
from ..parsers.ffmpeg_progress import ProgressCursor

CALCULATING = "Calculating…"
UNKNOWN = "--"


def estimate(cursor: ProgressCursor, previous: Progress | None = None) -> Progress:
    if cursor.total_seconds <= 0:
        return Progress(percent=previous.percent if previous else 0, eta_seconds=None)

    # half-up rounding; positions past the declared duration clamp to 100
    pct = int(cursor.current_seconds * 100 / cursor.total_seconds + 0.5)
    pct = max(0, min(100, pct))
    return Progress(percent=pct, eta_seconds=cursor.total_seconds - cursor.current_seconds)


def format_eta(eta_seconds: int | None) -> str:
    if eta_seconds is None:
        return UNKNOWN
    if eta_seconds < 0:
        return CALCULATING
    m, s = divmod(eta_seconds, 60)
    return f"{m}m {s}s"


def format_elapsed(seconds: float | None) -> str:
    if seconds is None or seconds < 0:
        return UNKNOWN
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"
