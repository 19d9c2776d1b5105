"""Tests for console rendering of batch events"""

import io
import logging
from pathlib import Path

from rich.console import Console

from splitcam import formatting
from splitcam.logging import configure_logging
from splitcam.models import (
    BatchEventType, BatchProgressEvent, BatchReport, EncodingCapability,
    EncodingProgress, FailedFile, SplitResult, SplitSide
)


def _console():
    return Console(file=io.StringIO(), width=120, force_terminal=False)


def _result(name="rec.mp4"):
    return SplitResult(
        input_path=Path(name), left_output=Path("rec-left.mp4"), right_output=Path("rec-right.mp4"),
        left_size=2048, right_size=4096, elapsed=75.0, capability=EncodingCapability.SOFTWARE,
    )


def test_progress_display_renders_events():
    console = _console()
    path = Path("rec.mp4")
    with formatting.BatchProgressDisplay(console) as display:
        display(BatchProgressEvent(BatchEventType.ANALYZING, 0, 2, path))
        display(BatchProgressEvent(BatchEventType.PROCESSING, 0, 2, path, side=SplitSide.LEFT))
        display(BatchProgressEvent(
            BatchEventType.PROGRESS, 0, 2, path, side=SplitSide.LEFT,
            progress=EncodingProgress(30.0, 90.0, fps=60.0, speed=2.0, percentage=33.3)
        ))
        display(BatchProgressEvent(BatchEventType.COMPLETED, 0, 2, path, result=_result()))
        display(BatchProgressEvent(BatchEventType.FAILED, 1, 2, Path("b.mp4"), error="boom"))

    output = console.file.getvalue()
    assert "[1/2] Analyzing rec.mp4" in output
    assert "Split complete: 2.0KiB | 4.0KiB in 1m 15s" in output
    assert "[2/2] ✗ Failed: boom" in output


def test_summary_lists_results_and_failures(monkeypatch):
    console = _console()
    monkeypatch.setattr(formatting, "console", console)
    report = BatchReport(
        results=[_result()],
        failures=[FailedFile(Path("bad.mp4"), "Probe failed: No video stream found in file")],
        skipped=[Path("late.mp4")],
        elapsed=80.0,
    )

    formatting.print_summary(report, 3)

    output = console.file.getvalue()
    assert "Total: 3 | ✓ 1 | ✗ 1 | skipped 1" in output
    assert "rec.mp4" in output
    assert "bad.mp4 - Probe failed" in output
    assert "Total time: 1m 20s" in output


def test_summary_single_success(monkeypatch):
    console = _console()
    monkeypatch.setattr(formatting, "console", console)
    formatting.print_summary(BatchReport(results=[_result()]), 1)
    assert "Video split successfully!" in console.file.getvalue()


def test_configure_logging_writes_session_file(tmp_path):
    log_file = configure_logging("DEBUG", log_dir=tmp_path / "logs")
    try:
        logging.getLogger("splitcam.test").debug("hello from test")
        for handler in logging.getLogger("splitcam").handlers:
            handler.flush()
        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("splitcam_")
        assert "hello from test" in log_file.read_text()
    finally:
        logger = logging.getLogger("splitcam")
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()


def test_configure_logging_accepts_lowercase_level():
    log_file = configure_logging("warning", file_logging=False)
    logger = logging.getLogger("splitcam")
    try:
        assert log_file is None
        assert logger.level == logging.WARNING
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
