"""Processing settings for a split batch."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from .config import DEFAULT_QUALITY, DEFAULT_OUTPUT_EXTENSION
from .models import QualityPreset

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ProcessingConfig:
    """Options that apply to every file in a batch.

    Attributes:
        quality: Quality preset (a QualityPreset or its name)
        output_format: Output extension; None keeps the input's extension
        output_dir: Output directory; None writes next to each input
        use_hardware_accel: Whether to detect a hardware encoder
        continue_on_error: Keep going after a file fails
    """
    quality: Union[QualityPreset, str] = DEFAULT_QUALITY
    output_format: Optional[str] = None
    output_dir: Optional[Path] = None
    use_hardware_accel: bool = True
    continue_on_error: bool = True

    def __post_init__(self) -> None:
        """Normalize and validate settings."""
        if not isinstance(self.quality, QualityPreset):
            self.quality = QualityPreset.from_name(self.quality)
        if self.output_format is not None:
            fmt = self.output_format.strip().lstrip(".")
            if not fmt or not fmt.isalnum():
                raise ValueError(f"Invalid output format: {self.output_format!r}")
            self.output_format = fmt.lower()
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir) if self.output_dir else None

    @classmethod
    def from_environment(cls, **overrides) -> "ProcessingConfig":
        """Create settings from SPLITCAM_* environment variables and explicit overrides."""
        values = {
            "quality": os.environ.get("SPLITCAM_QUALITY", DEFAULT_QUALITY),
            "output_format": os.environ.get("SPLITCAM_OUTPUT_FORMAT") or None,
            "output_dir": os.environ.get("SPLITCAM_OUTPUT_DIR") or None,
            "use_hardware_accel": os.environ.get("SPLITCAM_NO_HW_ACCEL", "").lower() not in _TRUE_VALUES,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def output_directory_for(self, input_path: Path) -> Path:
        """Directory the halves of input_path are written to."""
        if self.output_dir is not None:
            return self.output_dir
        return input_path.parent

    def output_paths_for(self, input_path: Path) -> Tuple[Path, Path]:
        """Left and right output paths: <stem>-left.<ext> and <stem>-right.<ext>."""
        ext = self.output_format or input_path.suffix.lstrip(".") or DEFAULT_OUTPUT_EXTENSION
        directory = self.output_directory_for(input_path)
        return (
            directory / f"{input_path.stem}-left.{ext}",
            directory / f"{input_path.stem}-right.{ext}",
        )
