"""Split execution for one side of one input

Responsibilities:
- Run ffmpeg to crop one half of a side-by-side recording
- Read ffmpeg's stderr on a worker thread, splitting on CR or LF
- Hand parsed progress snapshots to the caller in arrival order
- Release the child process and reader thread on every exit path
"""

import codecs
import logging
import queue
import re
import subprocess
import threading
from collections import deque
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from ..config import (
    PROGRESS_POLL_INTERVAL, PROCESS_TERMINATE_TIMEOUT, READER_JOIN_TIMEOUT,
    READ_CHUNK_SIZE, DIAGNOSTIC_TAIL_LINES, PROGRESS_LOG_INTERVAL
)
from ..engine import EngineRunner
from ..exceptions import SplitError
from ..models import EncodingCapability, EncodingProgress, QualityPreset, SplitSide
from .command_builders import build_split_command
from .progress import ProgressParser

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[EncodingProgress], None]

_LINE_BREAK_RE = re.compile(r"[\r\n]")

# Queue message kinds
_PROGRESS = "progress"
_ERROR = "error"
_EOF = "eof"

def iter_lines(chunks: Iterable[bytes]) -> Iterator[str]:
    """
    Recover logical lines from raw stderr chunks.

    Lines may end with CR (ffmpeg's in-place status updates) or LF.
    Empty fragments are dropped and an unterminated tail is flushed at EOF.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    for chunk in chunks:
        pending += decoder.decode(chunk)
        *lines, pending = _LINE_BREAK_RE.split(pending)
        for line in lines:
            if line:
                yield line
    pending += decoder.decode(b"", final=True)
    for line in _LINE_BREAK_RE.split(pending):
        if line:
            yield line

def _read_chunks(stream) -> Iterator[bytes]:
    read = getattr(stream, "read1", stream.read)
    while True:
        chunk = read(READ_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk

class _StderrReader:
    """Worker that parses ffmpeg's stderr and queues progress snapshots."""

    def __init__(self, stream, parser: ProgressParser, output_queue: queue.Queue):
        self.stream = stream
        self.parser = parser
        self.queue = output_queue
        self.tail = deque(maxlen=DIAGNOSTIC_TAIL_LINES)
        self.thread = threading.Thread(target=self._run, name="ffmpeg-stderr", daemon=True)

    def start(self) -> None:
        self.thread.start()

    def _run(self) -> None:
        try:
            for line in iter_lines(_read_chunks(self.stream)):
                self.tail.append(line)
                snapshot = self.parser.feed(line)
                if snapshot is not None:
                    self.queue.put((_PROGRESS, snapshot))
        except (OSError, ValueError) as e:
            self.queue.put((_ERROR, f"Error reading ffmpeg output: {e}"))
        finally:
            self.queue.put((_EOF, None))

    def diagnostics(self) -> str:
        return "\n".join(self.tail)

class SplitExecutor:
    """Runs ffmpeg for one side of one input file."""

    def __init__(self, runner: Optional[EngineRunner] = None,
                 poll_interval: float = PROGRESS_POLL_INTERVAL):
        self.runner = runner or EngineRunner()
        self.poll_interval = poll_interval

    def run(
        self,
        input_path: Path,
        output_path: Path,
        side: SplitSide,
        quality: QualityPreset,
        capability: EncodingCapability,
        known_duration: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> None:
        """
        Extract one side of input_path into output_path.

        Args:
            input_path: Side-by-side recording
            output_path: File ffmpeg writes the cropped half to
            side: Half to extract
            quality: Quality preset
            capability: Encoder backend
            known_duration: Source duration from ffprobe, if already known
            on_progress: Called once per parsed status line, in order

        Raises:
            SplitError: If ffmpeg cannot be started or exits non-zero
        """
        cmd = build_split_command(input_path, output_path, side, quality, capability)
        try:
            process = self.runner.spawn(cmd)
        except OSError as e:
            raise SplitError(f"could not start ffmpeg: {e}", module="split") from e

        output_queue = queue.Queue()
        reader = _StderrReader(process.stderr, ProgressParser(known_duration), output_queue)
        try:
            reader.start()
            self._drain(output_queue, reader, side, on_progress)
            returncode = process.wait()
        finally:
            self._cleanup(process, reader)

        if returncode != 0:
            diagnostics = reader.diagnostics()
            logger.error("ffmpeg failed on %s side of %s (exit %d)", side, input_path.name, returncode)
            logger.debug("ffmpeg output:\n%s", diagnostics)
            raise SplitError(
                diagnostics or f"ffmpeg exited with code {returncode}",
                module="split",
                output=diagnostics,
                exit_code=returncode
            )
        logger.info("Finished %s side: %s", side, output_path)

    def _drain(self, output_queue: queue.Queue, reader: _StderrReader,
               side: SplitSide, on_progress: Optional[ProgressCallback]) -> None:
        last_logged = -PROGRESS_LOG_INTERVAL
        while True:
            try:
                kind, payload = output_queue.get(timeout=self.poll_interval)
            except queue.Empty:
                if not reader.thread.is_alive() and output_queue.empty():
                    break
                continue
            if kind == _EOF:
                break
            if kind == _ERROR:
                logger.warning(payload)
                continue
            if payload.percentage - last_logged >= PROGRESS_LOG_INTERVAL:
                logger.debug("%s side progress: %.1f%%, fps: %.1f, speed: %.2fx",
                             side, payload.percentage, payload.fps, payload.speed)
                last_logged = payload.percentage
            if on_progress is not None:
                on_progress(payload)

    def _cleanup(self, process: subprocess.Popen, reader: _StderrReader) -> None:
        """Make sure the child is gone and its pipe and reader are released."""
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=PROCESS_TERMINATE_TIMEOUT)
            except subprocess.TimeoutExpired:
                logger.warning("ffmpeg did not exit after terminate, killing it")
                process.kill()
                process.wait()
        if process.stderr is not None:
            process.stderr.close()
        if reader.thread.ident is not None:
            reader.thread.join(timeout=READER_JOIN_TIMEOUT)
