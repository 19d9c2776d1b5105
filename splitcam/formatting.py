"""Rich-based console formatting utilities"""

from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn
from rich.table import Table
from rich.text import Text

from .models import BatchEventType, BatchProgressEvent, BatchReport
from .utils import format_duration, format_eta, format_size

console = Console()

def print_check(message: str) -> None:
    """Print a checkmark message in bold green."""
    text = Text("✓ ", style="bold green") + Text(message, style="bold")
    console.print(text)

def print_warning(message: str) -> None:
    """Print a warning message in bold yellow."""
    text = Text("⚠ ", style="bold yellow") + Text(message, style="bold")
    console.print(text)

def print_error(message: str) -> None:
    """Print an error message in bold red."""
    text = Text("✗ ", style="bold red") + Text(message, style="bold")
    console.print(text)

def print_success(message: str) -> None:
    """Print a success message in plain green."""
    text = Text("✓ ", style="green") + Text(message, style="green")
    console.print(text)

def print_header(title: str, width: int = 50) -> None:
    """Print a decorative header."""
    separator = Text("═" * width, style="bold cyan")
    console.print(separator)
    console.print(title, style="bold cyan")
    console.print(separator)

def print_info(message: str) -> None:
    """Print an informational message in a subtle style."""
    text = Text("ℹ ", style="bold blue") + Text(message, style="blue")
    console.print(text)

def _prefix(event: BatchProgressEvent) -> str:
    if event.total > 1:
        return f"[{event.index + 1}/{event.total}] "
    return ""

class BatchProgressDisplay:
    """Batch observer that renders events with a live rich progress bar.

    Use as a context manager so the live display is torn down even if
    the batch raises.
    """

    def __init__(self, progress_console: Console = None):
        self.console = progress_console or console
        self.progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>5.1f}%"),
            TextColumn("{task.fields[stats]}", style="dim"),
            console=self.console,
            transient=True,
        )
        self._task: Optional[TaskID] = None

    def __enter__(self) -> "BatchProgressDisplay":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._finish_task()
        self.progress.stop()

    def _finish_task(self) -> None:
        if self._task is not None:
            self.progress.remove_task(self._task)
            self._task = None

    def __call__(self, event: BatchProgressEvent) -> None:
        prefix = _prefix(event)
        if event.type is BatchEventType.ANALYZING:
            self.console.print(f"{prefix}Analyzing {event.path.name}...")
        elif event.type is BatchEventType.PROCESSING:
            self._finish_task()
            self._task = self.progress.add_task(
                f"{prefix}Extracting {event.side} side", total=100, stats=""
            )
        elif event.type is BatchEventType.PROGRESS and self._task is not None:
            snapshot = event.progress
            stats = f"{snapshot.fps:.0f} fps | {snapshot.speed:.2f}x | ETA {format_eta(snapshot.eta)}"
            self.progress.update(self._task, completed=snapshot.percentage, stats=stats)
        elif event.type is BatchEventType.COMPLETED:
            self._finish_task()
            result = event.result
            self.console.print(
                Text(f"{prefix}✓ Split complete: ", style="green")
                + Text(f"{format_size(result.left_size)} | {format_size(result.right_size)}"
                       f" in {format_duration(result.elapsed)}")
            )
        elif event.type is BatchEventType.FAILED:
            self._finish_task()
            self.console.print(Text(f"{prefix}✗ Failed: {event.error}", style="red"))

def print_summary(report: BatchReport, total: int) -> None:
    """Print the final batch summary."""
    console.print()
    print_header("Summary")

    if total == 1 and not report.cancelled:
        if report.success_count == 1:
            print_success("Video split successfully!")
        else:
            print_error("Video processing failed!")
    else:
        line = Text(f"Total: {total} | ") + Text(f"✓ {report.success_count}", style="green") \
            + Text(" | ") + Text(f"✗ {report.failure_count}", style="red")
        if report.skipped:
            line += Text(f" | skipped {len(report.skipped)}", style="yellow")
        console.print(line)
    if report.cancelled:
        print_warning("Batch was cancelled")

    if report.results:
        table = Table(title="Processed files", title_justify="left", show_edge=False)
        table.add_column("File")
        table.add_column("Left", justify="right")
        table.add_column("Right", justify="right")
        table.add_column("Time", justify="right")
        for result in report.results:
            table.add_row(
                result.input_path.name,
                format_size(result.left_size),
                format_size(result.right_size),
                format_duration(result.elapsed),
            )
        console.print(table)

    if report.failures:
        console.print(Text("\nFailed files:", style="red"))
        for failure in report.failures:
            console.print(Text(f"  {failure.path.name}", style="red") + Text(f" - {failure.message}", style="dim"))

    console.print(f"Total time: {format_duration(report.elapsed)}", style="dim")
