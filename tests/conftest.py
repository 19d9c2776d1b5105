"""Shared fixtures for splitcam tests"""

import io
import subprocess
from pathlib import Path

import pytest

from splitcam.models import VideoDescriptor


class FakeProcess:
    """Stand-in for subprocess.Popen with a canned stderr stream."""

    def __init__(self, stderr: bytes = b"", returncode: int = 0):
        self.stderr = io.BytesIO(stderr)
        self.returncode = None
        self._exit_code = returncode
        self.terminated = False
        self.killed = False

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if self.returncode is None:
            self.returncode = self._exit_code
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.returncode = -15

    def kill(self):
        self.killed = True
        self.returncode = -9


class FakeRunner:
    """EngineRunner replacement that records calls instead of spawning."""

    ffmpeg_path = "ffmpeg"
    ffprobe_path = "ffprobe"

    def __init__(self, process=None, run_result=None, spawn_error=None):
        self.process = process or FakeProcess()
        self.run_result = run_result
        self.spawn_error = spawn_error
        self.spawned = []
        self.ran = []

    def spawn(self, args):
        self.spawned.append(list(args))
        if self.spawn_error is not None:
            raise self.spawn_error
        return self.process

    def run(self, args, tool="ffmpeg"):
        self.ran.append((tool, list(args)))
        return self.run_result or subprocess.CompletedProcess(args, 0, stdout="", stderr="")


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def sbs_inputs(tmp_path):
    """Three small input files standing in for side-by-side recordings."""
    paths = []
    for name in ("one.mp4", "two.mp4", "three.mp4"):
        path = tmp_path / name
        path.write_bytes(b"\x00" * 16)
        paths.append(path)
    return paths


@pytest.fixture
def sbs_descriptor():
    def make(path: Path, width: int = 3840, height: int = 1080):
        return VideoDescriptor(path=path, width=width, height=height, codec="h264", file_size=16)
    return make


@pytest.fixture
def make_process():
    return FakeProcess


@pytest.fixture
def make_runner():
    return FakeRunner
