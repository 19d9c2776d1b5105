"""High-level pipeline orchestration for splitting a batch of recordings

Responsibilities:
  - Sequence analyze -> left -> right -> collect for every input.
  - Isolate failures to the file they happen in.
  - Observe cancellation between stages, never mid-encode.
  - Report per-file events to an observer and aggregate a batch report.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from .engine import EngineRunner
from .exceptions import OutputDirectoryError, ProbeError, SplitError
from .ffprobe.media import get_video_info, try_get_duration
from .models import (
    BatchEventType, BatchProgressEvent, BatchReport, EncodingCapability,
    EncodingProgress, FailedFile, QualityPreset, SplitResult, SplitSide
)
from .settings import ProcessingConfig
from .utils import check_resources, get_file_size_or_zero
from .video.command_builders import is_true_lossless
from .video.hardware import select_capability
from .video.split import SplitExecutor

logger = logging.getLogger(__name__)

Observer = Callable[[BatchProgressEvent], None]


class BatchState(Enum):
    """States of a batch; the per-file states refer to BatchOrchestrator.index."""
    AWAITING_START = auto()
    ANALYZING = auto()
    SPLITTING_LEFT = auto()
    SPLITTING_RIGHT = auto()
    COLLECTING = auto()
    COMPLETE = auto()
    CANCELLED = auto()


_IN_BATCH = (
    BatchState.ANALYZING,
    BatchState.SPLITTING_LEFT,
    BatchState.SPLITTING_RIGHT,
    BatchState.COLLECTING,
)


@dataclass
class _FileJob:
    """Working state for the input currently being split."""
    path: Path
    left_output: Path
    right_output: Path
    started_at: float
    duration: Optional[float] = None


class BatchOrchestrator:
    """Explicit state machine over a batch of side-by-side recordings.

    Call advance() repeatedly (or run() once) to drive the batch. Each
    advance() performs exactly one transition, so cancellation requested
    through cancel() is seen at the next stage boundary.
    """

    def __init__(
        self,
        inputs: Sequence[Path],
        config: Optional[ProcessingConfig] = None,
        observer: Optional[Observer] = None,
        runner: Optional[EngineRunner] = None,
        executor: Optional[SplitExecutor] = None,
        capability: Optional[EncodingCapability] = None
    ):
        self.inputs: List[Path] = [Path(p) for p in inputs]
        self.config = config or ProcessingConfig()
        self.observer = observer
        self.runner = runner or EngineRunner()
        self.executor = executor or SplitExecutor(self.runner)
        self.capability = capability
        self.state = BatchState.AWAITING_START
        self.index = 0
        self.report = BatchReport()
        self._job: Optional[_FileJob] = None
        self._cancel = threading.Event()
        self._started_at: Optional[float] = None
        self._collisions: Dict[int, Path] = {}

    @property
    def total(self) -> int:
        return len(self.inputs)

    @property
    def finished(self) -> bool:
        return self.state in (BatchState.COMPLETE, BatchState.CANCELLED)

    def cancel(self) -> None:
        """Request cancellation; safe to call from any thread."""
        logger.info("Cancellation requested")
        self._cancel.set()

    def abort(self) -> BatchReport:
        """Cancel right away, e.g. after an interrupt escaped a running stage.

        The file in flight and every later input are recorded as skipped.
        """
        if not self.finished:
            self.cancel()
            self._enter_cancelled()
        return self.report

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    def run(self) -> BatchReport:
        """Drive the batch to COMPLETE or CANCELLED and return the report."""
        while not self.finished:
            self.advance()
        return self.report

    def advance(self) -> BatchState:
        """Perform one state transition and return the new state."""
        if self.finished:
            return self.state
        if self._cancel.is_set():
            self._enter_cancelled()
            return self.state

        handlers = {
            BatchState.AWAITING_START: self._start,
            BatchState.ANALYZING: self._analyze,
            BatchState.SPLITTING_LEFT: lambda: self._split(SplitSide.LEFT),
            BatchState.SPLITTING_RIGHT: lambda: self._split(SplitSide.RIGHT),
            BatchState.COLLECTING: self._collect,
        }
        handlers[self.state]()
        if self.finished:
            self.report.elapsed = time.monotonic() - (self._started_at or time.monotonic())
        return self.state

    def _emit(self, event_type: BatchEventType, **data) -> None:
        if self.observer is None:
            return
        self.observer(BatchProgressEvent(
            type=event_type, index=self.index, total=self.total,
            path=self.inputs[self.index], **data
        ))

    def _start(self) -> None:
        self._started_at = time.monotonic()
        if not self.inputs:
            logger.info("No inputs to process")
            self.state = BatchState.COMPLETE
            return

        if self.config.output_dir is not None:
            try:
                self.config.output_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputDirectoryError(
                    f"Failed to create output directory {self.config.output_dir}: {e}",
                    module="pipeline"
                ) from e

        self._collisions = self._find_output_collisions()
        check_resources(self.config.output_directory_for(self.inputs[0]))

        if self.capability is None:
            self.capability = select_capability(self.config.use_hardware_accel, self.runner)
        if self.config.quality is QualityPreset.LOSSLESS and \
                not is_true_lossless(self.config.quality, self.capability):
            logger.warning(
                "%s cannot encode losslessly; using its highest quality setting instead",
                self.capability.label
            )
        logger.info("Processing %d file(s) with %s at %s quality",
                    self.total, self.capability.label, self.config.quality)
        self.index = 0
        self.state = BatchState.ANALYZING

    def _find_output_collisions(self) -> Dict[int, Path]:
        """Map each input whose outputs an earlier input already claims to that input."""
        claimed: Dict[Path, Path] = {}
        collisions = {}
        for index, path in enumerate(self.inputs):
            for output in self.config.output_paths_for(path):
                owner = claimed.setdefault(output.absolute(), path)
                if owner is not path:
                    logger.warning("%s and %s both write %s", owner, path, output)
                    collisions[index] = owner
                    break
        return collisions

    def _analyze(self) -> None:
        path = self.inputs[self.index]
        self._emit(BatchEventType.ANALYZING)
        logger.info("[%d/%d] Analyzing %s", self.index + 1, self.total, path.name)
        left_output, right_output = self.config.output_paths_for(path)
        self._job = _FileJob(path, left_output, right_output, started_at=time.monotonic())

        owner = self._collisions.get(self.index)
        if owner is not None:
            self._fail(f"Output {left_output.name} would overwrite the output of {owner}")
            return
        if not path.is_file():
            self._fail("File not found")
            return
        try:
            info = get_video_info(path, self.runner)
        except ProbeError as e:
            self._fail(e.message)
            return
        if not info.is_valid_dimensions():
            logger.warning("%s is %dx%d (%s); expected 3840x1080 (32:9), output may not be as expected",
                           path.name, info.width, info.height, info.aspect_ratio)

        self._job.duration = try_get_duration(path, self.runner)
        self.state = BatchState.SPLITTING_LEFT

    def _split(self, side: SplitSide) -> None:
        job = self._job
        output = job.left_output if side is SplitSide.LEFT else job.right_output
        self._emit(BatchEventType.PROCESSING, side=side)
        logger.info("[%d/%d] Extracting %s side of %s", self.index + 1, self.total, side, job.path.name)

        def on_progress(progress: EncodingProgress) -> None:
            self._emit(BatchEventType.PROGRESS, side=side, progress=progress)

        try:
            self.executor.run(
                job.path, output, side, self.config.quality, self.capability,
                known_duration=job.duration, on_progress=on_progress
            )
        except SplitError as e:
            self._fail(f"{side} side: {e.message}")
            return
        self.state = BatchState.SPLITTING_RIGHT if side is SplitSide.LEFT else BatchState.COLLECTING

    def _collect(self) -> None:
        job = self._job
        result = SplitResult(
            input_path=job.path,
            left_output=job.left_output,
            right_output=job.right_output,
            left_size=get_file_size_or_zero(job.left_output),
            right_size=get_file_size_or_zero(job.right_output),
            elapsed=time.monotonic() - job.started_at,
            capability=self.capability,
        )
        self.report.results.append(result)
        logger.info("[%d/%d] Split complete: %s", self.index + 1, self.total, job.path.name)
        self._emit(BatchEventType.COMPLETED, result=result)
        self._next_file()

    def _fail(self, message: str) -> None:
        path = self.inputs[self.index]
        logger.error("[%d/%d] %s failed: %s", self.index + 1, self.total, path.name, message)
        self.report.failures.append(FailedFile(path, message))
        self._emit(BatchEventType.FAILED, error=message)
        if not self.config.continue_on_error:
            self.report.skipped.extend(self.inputs[self.index + 1:])
            logger.warning("Stopping batch after failure; %d file(s) not processed",
                           len(self.report.skipped))
            self._job = None
            self.state = BatchState.COMPLETE
            return
        self._next_file()

    def _next_file(self) -> None:
        self._job = None
        self.index += 1
        self.state = BatchState.ANALYZING if self.index < self.total else BatchState.COMPLETE

    def _enter_cancelled(self) -> None:
        if self.state in _IN_BATCH:
            self.report.skipped.extend(self.inputs[self.index:])
        elif self.state is BatchState.AWAITING_START:
            self.report.skipped.extend(self.inputs)
        logger.warning("Batch cancelled; %d file(s) not processed", len(self.report.skipped))
        self._job = None
        self.report.cancelled = True
        self.state = BatchState.CANCELLED
        self.report.elapsed = time.monotonic() - (self._started_at or time.monotonic())


def process_batch(
    inputs: Sequence[Path],
    config: Optional[ProcessingConfig] = None,
    observer: Optional[Observer] = None,
    runner: Optional[EngineRunner] = None
) -> BatchReport:
    """Split every input and return the batch report."""
    return BatchOrchestrator(inputs, config, observer=observer, runner=runner).run()


class BackgroundBatch:
    """Runs a BatchOrchestrator on a worker thread.

    Events are delivered through an unbounded FIFO queue so a host event
    loop can poll them without blocking.
    """

    def __init__(self, orchestrator: BatchOrchestrator):
        self.orchestrator = orchestrator
        self.events: "queue.Queue[BatchProgressEvent]" = queue.Queue()
        self.error: Optional[BaseException] = None
        orchestrator.observer = self.events.put
        self._thread = threading.Thread(target=self._run, name="splitcam-batch", daemon=True)

    def start(self) -> "BackgroundBatch":
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.orchestrator.run()
        except Exception as e:
            logger.exception("Batch worker failed: %s", e)
            self.error = e

    def poll(self, timeout: float = 0.0) -> Iterator[BatchProgressEvent]:
        """Yield queued events, waiting at most timeout for the first one."""
        try:
            event = self.events.get(timeout=timeout) if timeout > 0 else self.events.get_nowait()
        except queue.Empty:
            return
        yield event
        while True:
            try:
                yield self.events.get_nowait()
            except queue.Empty:
                return

    def cancel(self) -> None:
        self.orchestrator.cancel()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> BatchReport:
        self._thread.join(timeout)
        return self.orchestrator.report
