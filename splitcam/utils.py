"""Utility functions for splitcam"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import psutil

from .config import MEMORY_WARNING_PERCENT, MIN_FREE_DISK_BYTES
from .engine import EngineRunner
from .exceptions import EngineNotFoundError

logger = logging.getLogger(__name__)

def get_file_size(path: Union[str, Path]) -> int:
    """Get file size in bytes"""
    return Path(path).stat().st_size

def get_file_size_or_zero(path: Union[str, Path]) -> int:
    """Get file size in bytes, or 0 if the file cannot be read"""
    try:
        return get_file_size(path)
    except OSError:
        return 0

def get_timestamp() -> str:
    """Get current timestamp in YYYYMMDD_HHMMSS format"""
    return datetime.now().strftime("%Y%m%d_%H%M%S")

def format_size(size: int) -> str:
    """Format file size for display"""
    for unit in ['B', 'KiB', 'MiB', 'GiB', 'TiB']:
        if size < 1024:
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}TiB"

def format_duration(seconds: float) -> str:
    """Format elapsed wall-clock time, e.g. "1h 2m 3s" or "45s"."""
    total = int(seconds)
    hours, minutes, secs = total // 3600, (total % 3600) // 60, total % 60
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"

def format_eta(eta: Optional[float]) -> str:
    """Format a remaining-time estimate for progress display."""
    if eta is None:
        return "calculating..."
    if eta < 60:
        return f"~{int(eta)}s"
    if eta < 3600:
        return f"~{int(eta // 60)}:{int(eta % 60):02d}"
    return f"~{int(eta // 3600)}h {int((eta % 3600) // 60):02d}m"

def check_dependencies(runner: Optional[EngineRunner] = None) -> bool:
    """Check that ffmpeg and ffprobe can be run"""
    runner = runner or EngineRunner()
    for tool in ("ffmpeg", "ffprobe"):
        try:
            result = runner.run(["-version"], tool=tool)
        except OSError as e:
            logger.error("Required dependency not found: %s (%s)", tool, e)
            return False
        if result.returncode != 0:
            logger.error("Required dependency not working: %s", tool)
            return False
    return True

def require_dependencies(runner: Optional[EngineRunner] = None) -> None:
    """
    Ensure ffmpeg and ffprobe are usable.

    Raises:
        EngineNotFoundError: If either binary cannot be run
    """
    if not check_dependencies(runner):
        raise EngineNotFoundError("FFmpeg is not installed!", module="utils")

def engine_version(runner: Optional[EngineRunner] = None) -> Optional[str]:
    """Return ffmpeg's version line, or None if it cannot be read"""
    runner = runner or EngineRunner()
    try:
        result = runner.run(["-version"])
    except OSError:
        return None
    if result.returncode != 0 or not result.stdout:
        return None
    return result.stdout.splitlines()[0].strip()

def check_resources(output_dir: Path) -> bool:
    """
    Warn about host conditions that tend to break long encodes.

    Returns:
        bool: True if no warning was raised
    """
    healthy = True
    memory = psutil.virtual_memory()
    if memory.percent >= MEMORY_WARNING_PERCENT:
        logger.warning("Memory usage is high (%.1f%%); encoding may be slow", memory.percent)
        healthy = False
    try:
        free = psutil.disk_usage(str(output_dir)).free
    except OSError as e:
        logger.debug("Could not read free space for %s: %s", output_dir, e)
        return healthy
    if free < MIN_FREE_DISK_BYTES:
        logger.warning("Only %s free in %s", format_size(free), output_dir)
        healthy = False
    return healthy
