"""ffmpeg progress parsing

Responsibilities:
- Extract the source duration from ffmpeg's input banner
- Parse status lines (frame=, fps=, time=, speed=) into snapshots
- Keep the duration latched for the lifetime of one parser

ffmpeg rewrites its status line in place with carriage returns; callers
are expected to split the stream into lines before feeding the parser.
"""

import re
from typing import Optional

from ..models import EncodingProgress

DURATION_RE = re.compile(r"Duration:\s*(\d{2}):(\d{2}):(\d{2})\.(\d+)")
TIME_RE = re.compile(r"time=\s*(\d{2}):(\d{2}):(\d{2})\.(\d+)")
FRAME_RE = re.compile(r"frame=\s*(\d+)")
FPS_RE = re.compile(r"fps=\s*([\d.]+)")
SPEED_RE = re.compile(r"speed=\s*([\d.]+)x")

_TIMESTAMP_RE = re.compile(r"^(\d{2}):(\d{2}):(\d{2})\.(\d+)$")

def _to_seconds(hours: str, minutes: str, seconds: str, fraction: str) -> float:
    # Only hundredths are significant; longer fractions are truncated
    centis = int(fraction[:2].ljust(2, "0"))
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + centis / 100

def parse_timestamp(text: str) -> Optional[float]:
    """Parse "HH:MM:SS.ff" into seconds, or None if it is not a timestamp."""
    match = _TIMESTAMP_RE.match(text.strip())
    if not match:
        return None
    return _to_seconds(*match.groups())

def parse_duration(line: str) -> Optional[float]:
    """
    Parse the duration from ffmpeg's input banner.

    Example: "  Duration: 00:10:45.20, start: 0.000000, bitrate: 5000 kb/s"
    """
    match = DURATION_RE.search(line)
    if not match:
        return None
    return _to_seconds(*match.groups())

def _number(pattern: re.Pattern, line: str, cast):
    match = pattern.search(line)
    if not match:
        return cast(0)
    try:
        return cast(match.group(1))
    except ValueError:
        return cast(0)

def parse_progress_line(line: str, total_duration: Optional[float] = None) -> Optional[EncodingProgress]:
    """
    Parse one ffmpeg status line.

    Example: "frame= 1234 fps= 45 q=28.0 size= 18234kB time=00:00:45.67 bitrate=3265.5kbits/s speed=1.23x"

    Returns:
        A snapshot, or None if the line carries no time= field
    """
    match = TIME_RE.search(line)
    if not match:
        return None
    current = _to_seconds(*match.groups())
    total = total_duration if total_duration and total_duration > 0 else 0.0

    percentage = 0.0
    if total > 0:
        percentage = max(0.0, min(100.0, current / total * 100))

    return EncodingProgress(
        current_time=current,
        total_duration=total,
        frame=_number(FRAME_RE, line, int),
        fps=_number(FPS_RE, line, float),
        speed=_number(SPEED_RE, line, float),
        percentage=percentage,
    )

class ProgressParser:
    """Stateful parser for one ffmpeg run.

    The duration is set at most once, either from the constructor (a
    value obtained through ffprobe) or from the first Duration: line seen.
    """

    def __init__(self, total_duration: Optional[float] = None):
        self.total_duration = total_duration
        self.duration_known = total_duration is not None and total_duration > 0

    def feed(self, line: str) -> Optional[EncodingProgress]:
        """Consume one line; return a snapshot if it was a status line."""
        if not self.duration_known:
            duration = parse_duration(line)
            if duration is not None:
                self.total_duration = duration
                self.duration_known = True
        return parse_progress_line(line, self.total_duration)
