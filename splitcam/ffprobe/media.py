"""High-level media property extraction

Responsibilities:
- Describe the first video stream of an input file
- Read the container duration for progress calculations
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import ffmpeg

from ..engine import EngineRunner
from ..exceptions import ProbeError
from ..models import VideoDescriptor
from ..utils import get_file_size
from ..video.command_builders import build_stream_probe_args, build_duration_probe_command

logger = logging.getLogger(__name__)

def _select_video_stream(data: Dict[str, Any]) -> Dict[str, Any]:
    for stream in data.get("streams") or []:
        if (stream.get("codec_type") == "video"
                and stream.get("width") is not None
                and stream.get("height") is not None):
            return stream
    raise ProbeError("No video stream found in file", module="media")

def get_video_info(path: Path, runner: Optional[EngineRunner] = None) -> VideoDescriptor:
    """
    Get key video stream information.

    Args:
        path: Path to the media file
        runner: Engine runner to probe with

    Returns:
        VideoDescriptor for the first video stream with known dimensions

    Raises:
        ProbeError: If ffprobe fails, returns invalid JSON or finds no video stream
    """
    runner = runner or EngineRunner()
    try:
        data = runner.probe(path, **build_stream_probe_args())
    except ffmpeg.Error as e:
        stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else str(e)
        raise ProbeError(stderr, module="media") from e
    except (OSError, ValueError) as e:
        raise ProbeError(str(e), module="media") from e

    stream = _select_video_stream(data)
    try:
        width, height = int(stream["width"]), int(stream["height"])
    except (TypeError, ValueError) as e:
        raise ProbeError(f"Invalid video dimensions in {path.name}", module="media") from e

    try:
        file_size = get_file_size(path)
    except OSError:
        file_size = None

    return VideoDescriptor(
        path=path,
        width=width,
        height=height,
        codec=stream.get("codec_name") or "unknown",
        file_size=file_size,
    )

def get_duration(path: Path, runner: Optional[EngineRunner] = None) -> float:
    """
    Get the container duration in seconds.

    Raises:
        ProbeError: If ffprobe fails or prints something other than a number
    """
    runner = runner or EngineRunner()
    try:
        result = runner.run(build_duration_probe_command(path), tool="ffprobe")
    except OSError as e:
        raise ProbeError(str(e), module="media") from e
    if result.returncode != 0:
        raise ProbeError(result.stderr.strip() or "ffprobe failed", module="media")
    try:
        return float(result.stdout.strip())
    except ValueError as e:
        raise ProbeError(f"Failed to parse duration: {result.stdout.strip()!r}", module="media") from e

def try_get_duration(path: Path, runner: Optional[EngineRunner] = None) -> Optional[float]:
    """Best-effort duration lookup; None when it cannot be determined."""
    try:
        duration = get_duration(path, runner)
    except ProbeError as e:
        logger.warning("Could not determine duration of %s: %s", path.name, e)
        return None
    return duration if duration > 0 else None
