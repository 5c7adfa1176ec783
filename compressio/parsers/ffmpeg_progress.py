# compressio/parsers/ffmpeg_progress.py
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# "  Duration: 00:01:30.52, start: 0.000000, bitrate: 1205 kb/s"
DURATION_RE = re.compile(r"Duration:\s*(\d+):(\d+):(\d+)")
# "frame=  912 fps=121 q=-1.0 size=  2048kB time=00:00:45.12 bitrate=..."
TIME_RE = re.compile(r"time=\s*(\d+):(\d+):(\d+)")

LAST_LINE_CHARS = 80


@dataclass
class ProgressCursor:
    total_seconds: int = 0    # 0 => not announced yet
    current_seconds: int = 0
    last_line: str = ""


def _hms(m: re.Match) -> int:
    h, mi, s = (int(g) for g in m.groups())
    return h*3600 + mi*60 + s


def ingest(line: str, cursor: ProgressCursor) -> ProgressCursor:
    """Fold one backend output line into the cursor.

    Only the first duration announcement of a run is kept. Every position
    marker overwrites ``current_seconds``, even when it goes backwards.
    Lines carrying neither are kept as display text only.
    """
    line = line.strip()
    if not line:
        return cursor

    matched = False
    if cursor.total_seconds == 0 and (md := DURATION_RE.search(line)):
        cursor.total_seconds = _hms(md)
        matched = True
        logger.debug("Source duration: %ss", cursor.total_seconds)
    if mt := TIME_RE.search(line):
        cursor.current_seconds = _hms(mt)
        matched = True

    cursor.last_line = line[-LAST_LINE_CHARS:]
    if not matched:
        logger.debug("Log line without progress: %s", line)
    return cursor
