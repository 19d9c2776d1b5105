"""Helper functions for building ffmpeg and ffprobe arguments

All builders return argument lists without the binary itself;
EngineRunner prepends the resolved ffmpeg/ffprobe path.
"""

import os
from pathlib import Path
from typing import Dict, List

from ..models import EncodingCapability, QualityPreset, SplitSide

_LOSSLESS = QualityPreset.LOSSLESS
_HIGH = QualityPreset.HIGH
_MEDIUM = QualityPreset.MEDIUM

# Hardware backends expose different rate-control knobs, so each one
# maps the presets onto its own parameters.
_RATE_CONTROL: Dict[EncodingCapability, Dict[QualityPreset, List[str]]] = {
    EncodingCapability.VIDEOTOOLBOX: {
        _LOSSLESS: ["-b:v", "25M", "-allow_sw", "1"],
        _HIGH: ["-b:v", "15M", "-allow_sw", "1"],
        _MEDIUM: ["-b:v", "10M", "-allow_sw", "1"],
    },
    EncodingCapability.NVENC: {
        _LOSSLESS: ["-preset", "p7", "-cq", "15"],
        _HIGH: ["-preset", "p7", "-cq", "18"],
        _MEDIUM: ["-preset", "p4", "-cq", "23"],
    },
    EncodingCapability.QSV: {
        _LOSSLESS: ["-global_quality", "15", "-look_ahead", "1"],
        _HIGH: ["-global_quality", "18", "-look_ahead", "1"],
        _MEDIUM: ["-global_quality", "23", "-look_ahead", "1"],
    },
    EncodingCapability.AMF: {
        _LOSSLESS: ["-rc", "cqp", "-qp_i", "15", "-qp_p", "15"],
        _HIGH: ["-rc", "cqp", "-qp_i", "18", "-qp_p", "18"],
        _MEDIUM: ["-rc", "cqp", "-qp_i", "23", "-qp_p", "23"],
    },
    EncodingCapability.SOFTWARE: {
        _LOSSLESS: ["-crf", "0", "-preset", "veryslow"],
        _HIGH: ["-crf", "18", "-preset", "slow"],
        _MEDIUM: ["-crf", "23", "-preset", "medium"],
    },
}

def plan_arguments(quality: QualityPreset, capability: EncodingCapability) -> List[str]:
    """
    Map a quality preset and encoder onto ffmpeg codec arguments.

    Audio is always stream-copied.
    """
    return (
        ["-c:v", capability.codec]
        + list(_RATE_CONTROL[capability][quality])
        + ["-c:a", "copy"]
    )

def is_true_lossless(quality: QualityPreset, capability: EncodingCapability) -> bool:
    """Only libx264 at CRF 0 is mathematically lossless; hardware presets are high-bitrate."""
    return quality is QualityPreset.LOSSLESS and not capability.is_hardware

def build_split_command(
    input_file: Path,
    output_file: Path,
    side: SplitSide,
    quality: QualityPreset,
    capability: EncodingCapability
) -> List[str]:
    """Build ffmpeg arguments that crop one side of the input into output_file"""
    return (
        ["-i", os.fspath(input_file), "-vf", side.crop_filter]
        + plan_arguments(quality, capability)
        + ["-y", os.fspath(output_file)]
    )

def build_encoders_command() -> List[str]:
    """Build ffmpeg arguments listing the compiled-in encoders"""
    return ["-hide_banner", "-encoders"]

def build_stream_probe_args() -> Dict[str, str]:
    """ffprobe options (ffmpeg.probe keyword form) for the first video stream"""
    return {
        "v": "error",
        "select_streams": "v:0",
        "show_entries": "stream=width,height,codec_name,codec_type",
    }

def build_duration_probe_command(input_file: Path) -> List[str]:
    """Build ffprobe arguments printing the container duration as a bare number"""
    return [
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        os.fspath(input_file)
    ]
