"""Configuration settings for splitcam

This module centralizes configuration including:
- Log directory and default logging level
- ffmpeg/ffprobe binary overrides
- Expected recording geometry
- Process polling and termination timeouts
- Host resource warning thresholds

User-configurable values are read from environment variables.
"""

import os
from pathlib import Path

# LOG_DIR: user definable with default of "$HOME/splitcam_logs"
LOG_DIR = Path(os.environ.get("SPLITCAM_LOG_DIR", str(Path.home() / "splitcam_logs")))

# Logging configuration
LOG_LEVEL = os.environ.get("SPLITCAM_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL

# Engine binaries; empty means "resolve automatically"
FFMPEG_BIN = os.environ.get("SPLITCAM_FFMPEG", "")
FFPROBE_BIN = os.environ.get("SPLITCAM_FFPROBE", "")

# Recording geometry (two 1920x1080 halves side by side)
HALF_WIDTH = 1920
FRAME_HEIGHT = 1080
EXPECTED_WIDTH = HALF_WIDTH * 2
EXPECTED_HEIGHT = FRAME_HEIGHT

# Quality preset used when none is given
DEFAULT_QUALITY = "lossless"

# Extension used when the input has none and no format is requested
DEFAULT_OUTPUT_EXTENSION = "mp4"

# Split process handling
PROGRESS_POLL_INTERVAL = 0.05  # Seconds between queue polls
PROCESS_TERMINATE_TIMEOUT = 5.0  # Seconds to wait after terminate() before kill()
READER_JOIN_TIMEOUT = 1.0  # Seconds to wait for the stderr reader thread
READ_CHUNK_SIZE = 4096  # Bytes per read from ffmpeg's stderr
DIAGNOSTIC_TAIL_LINES = 40  # stderr lines kept for error messages

# Progress logging granularity (percent)
PROGRESS_LOG_INTERVAL = 10.0

# Host resource warnings
MEMORY_WARNING_PERCENT = 90.0
MIN_FREE_DISK_BYTES = 2 * 1024 ** 3
