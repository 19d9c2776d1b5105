"""ffmpeg/ffprobe process boundary

Responsibilities:
- Resolve the ffmpeg and ffprobe binaries
- Run a binary and collect its full output (probes)
- Spawn ffmpeg with its diagnostic stream piped (splits)
- Query ffprobe's JSON stream description

Everything above this module talks to an EngineRunner instead of
subprocess, so tests can swap in a fake runner.
"""

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import ffmpeg

from .config import FFMPEG_BIN, FFPROBE_BIN

logger = logging.getLogger(__name__)

def _bundled_path(name: str) -> Optional[Path]:
    """Locate a binary shipped alongside a frozen (PyInstaller) build."""
    if not getattr(sys, "frozen", False):
        return None
    if sys.platform == "win32":
        name = f"{name}.exe"
    roots = [Path(getattr(sys, "_MEIPASS", "")), Path(sys.executable).parent]
    for root in roots:
        for candidate in (root / name, root / "bin" / name):
            if candidate.is_file():
                return candidate
    return None

def resolve_binary(name: str, override: str = "") -> str:
    """
    Resolve the path of an engine binary.

    Resolution order: explicit override, bundled binary, system PATH.
    Falls back to the bare name so the spawn error names the binary.
    """
    if override:
        return override
    bundled = _bundled_path(name)
    if bundled is not None:
        return str(bundled)
    return shutil.which(name) or name

class EngineRunner:
    """Runs ffmpeg and ffprobe as child processes."""

    def __init__(self, ffmpeg_path: Optional[str] = None, ffprobe_path: Optional[str] = None):
        self.ffmpeg_path = ffmpeg_path or resolve_binary("ffmpeg", FFMPEG_BIN)
        self.ffprobe_path = ffprobe_path or resolve_binary("ffprobe", FFPROBE_BIN)

    def _binary(self, tool: str) -> str:
        if tool == "ffprobe":
            return self.ffprobe_path
        return self.ffmpeg_path

    def run(self, args: List[str], tool: str = "ffmpeg") -> subprocess.CompletedProcess:
        """
        Run a tool to completion and capture its output.

        Args:
            args: Arguments, without the binary itself
            tool: "ffmpeg" or "ffprobe"

        Returns:
            The completed process; a non-zero exit status is not raised

        Raises:
            OSError: If the binary cannot be started
        """
        cmd = [self._binary(tool)] + list(args)
        logger.debug("Running command: %s", " ".join(cmd))
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
        if result.returncode != 0:
            logger.debug("Command exited with %d: %s", result.returncode, result.stderr.strip())
        return result

    def spawn(self, args: List[str]) -> subprocess.Popen:
        """
        Start ffmpeg with stderr piped as bytes and stdout discarded.

        Raises:
            OSError: If the binary cannot be started
        """
        cmd = [self.ffmpeg_path] + list(args)
        logger.info("Running ffmpeg command:\n%s", " \\\n    ".join(cmd))
        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )

    def probe(self, path: Path, **kwargs: Any) -> Dict[str, Any]:
        """
        Describe a media file with ffprobe's JSON output.

        Raises:
            ffmpeg.Error: If ffprobe exits non-zero
            OSError: If ffprobe cannot be started
            ValueError: If the output is not valid JSON
        """
        logger.debug("Probing %s", path)
        return ffmpeg.probe(os.fspath(path), cmd=self.ffprobe_path, **kwargs)
