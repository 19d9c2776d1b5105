"""Data model for the split pipeline

Responsibilities:
- Enumerate quality presets, encoder capabilities and split sides
- Describe probed input videos and finished split results
- Carry progress snapshots and batch events to observers
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional

from .config import HALF_WIDTH, FRAME_HEIGHT, EXPECTED_WIDTH, EXPECTED_HEIGHT
from .exceptions import InvalidQualityError, InvalidSideError, BatchCancelledError


class QualityPreset(Enum):
    """Encoding fidelity tier, independent of the encoder backend."""
    LOSSLESS = "lossless"
    HIGH = "high"
    MEDIUM = "medium"

    @classmethod
    def from_name(cls, name: str) -> "QualityPreset":
        """Parse a preset name case-insensitively.

        Raises:
            InvalidQualityError: If the name is not a known preset
        """
        try:
            return cls(name.strip().lower())
        except (ValueError, AttributeError) as e:
            raise InvalidQualityError(str(name), module="models") from e

    def __str__(self) -> str:
        return self.value


class EncodingCapability(Enum):
    """H.264 encoder backends, declared in order of preference."""
    VIDEOTOOLBOX = ("h264_videotoolbox", "VideoToolbox (Apple)")
    NVENC = ("h264_nvenc", "NVENC (NVIDIA)")
    QSV = ("h264_qsv", "Quick Sync (Intel)")
    AMF = ("h264_amf", "AMF (AMD)")
    SOFTWARE = ("libx264", "Software (libx264)")

    def __init__(self, codec: str, label: str):
        self.codec = codec
        self.label = label

    @property
    def is_hardware(self) -> bool:
        return self is not EncodingCapability.SOFTWARE

    def __str__(self) -> str:
        return self.label


class SplitSide(Enum):
    """One of the two halves of a side-by-side recording."""
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_name(cls, name: str) -> "SplitSide":
        """Parse a side name case-insensitively.

        Raises:
            InvalidSideError: If the name is not left or right
        """
        try:
            return cls(name.strip().lower())
        except (ValueError, AttributeError) as e:
            raise InvalidSideError(str(name), module="models") from e

    @property
    def crop_filter(self) -> str:
        """ffmpeg crop filter for this half (fixed geometry)."""
        x_offset = 0 if self is SplitSide.LEFT else HALF_WIDTH
        return f"crop={HALF_WIDTH}:{FRAME_HEIGHT}:{x_offset}:0"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VideoDescriptor:
    """Probed properties of an input video.

    Attributes:
        path: Path to the video file
        width: Video width in pixels
        height: Video height in pixels
        codec: Video codec name (e.g. "h264")
        file_size: Size in bytes, if it could be read
    """
    path: Path
    width: int
    height: int
    codec: str
    file_size: Optional[int] = None

    def is_valid_dimensions(self) -> bool:
        """True for the expected 3840x1080 side-by-side layout."""
        return self.width == EXPECTED_WIDTH and self.height == EXPECTED_HEIGHT

    @property
    def aspect_ratio(self) -> str:
        divisor = math.gcd(self.width, self.height) or 1
        return f"{self.width // divisor}:{self.height // divisor}"


@dataclass(frozen=True)
class EncodingProgress:
    """Snapshot of ffmpeg's progress while encoding one side.

    Attributes:
        current_time: Position reached in the source (seconds)
        total_duration: Source duration (seconds), 0.0 when unknown
        frame: Frames encoded so far
        fps: Current encoding rate in frames per second
        speed: Speed multiplier relative to real time
        percentage: Completion percentage (0-100)
    """
    current_time: float
    total_duration: float = 0.0
    frame: int = 0
    fps: float = 0.0
    speed: float = 0.0
    percentage: float = 0.0

    @property
    def eta(self) -> Optional[float]:
        """Estimated seconds remaining, or None while it cannot be computed."""
        if self.speed <= 0 or self.total_duration <= 0:
            return None
        remaining = self.total_duration - self.current_time
        if remaining <= 0:
            return 0.0
        return remaining / self.speed


@dataclass(frozen=True)
class SplitResult:
    """Outcome of splitting one input into both halves."""
    input_path: Path
    left_output: Path
    right_output: Path
    left_size: int
    right_size: int
    elapsed: float
    capability: EncodingCapability


class BatchEventType(Enum):
    """Kinds of events emitted while a batch runs."""
    ANALYZING = auto()
    PROCESSING = auto()
    PROGRESS = auto()
    COMPLETED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class BatchProgressEvent:
    """Event delivered to batch observers.

    Attributes:
        type: Kind of event
        index: Zero-based position of the input in the batch
        total: Number of inputs in the batch
        path: Input file the event refers to
        side: Side being split (PROCESSING and PROGRESS)
        progress: Encoding snapshot (PROGRESS)
        result: Finished split (COMPLETED)
        error: Failure message (FAILED)
    """
    type: BatchEventType
    index: int
    total: int
    path: Path
    side: Optional[SplitSide] = None
    progress: Optional[EncodingProgress] = None
    result: Optional[SplitResult] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class FailedFile:
    """An input that could not be split."""
    path: Path
    message: str


@dataclass
class BatchReport:
    """Aggregated outcome of a batch."""
    results: List[SplitResult] = field(default_factory=list)
    failures: List[FailedFile] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    cancelled: bool = False
    elapsed: float = 0.0

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures and not self.skipped and not self.cancelled

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise BatchCancelledError(
                f"Batch cancelled after {self.success_count} completed file(s)",
                module="pipeline"
            )
