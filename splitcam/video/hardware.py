"""Hardware encoder detection"""

import logging
import platform
from typing import Optional

from ..engine import EngineRunner
from ..models import EncodingCapability
from .command_builders import build_encoders_command

logger = logging.getLogger(__name__)

# Capabilities that only exist on one host OS
_PLATFORM_ONLY = {
    EncodingCapability.VIDEOTOOLBOX: "Darwin",
}

def _candidates(system: str):
    for capability in EncodingCapability:
        if not capability.is_hardware:
            continue
        required = _PLATFORM_ONLY.get(capability)
        if required is not None and required != system:
            continue
        yield capability

def detect_capability(runner: Optional[EngineRunner] = None) -> EncodingCapability:
    """
    Detect the best available H.264 encoder.

    Lists ffmpeg's encoders once and returns the first hardware encoder,
    in order of preference, whose name appears in the listing. Falls back
    to software encoding if the listing cannot be obtained.
    """
    runner = runner or EngineRunner()
    try:
        result = runner.run(build_encoders_command())
    except OSError as e:
        logger.warning("Error listing ffmpeg encoders: %s", e)
        return EncodingCapability.SOFTWARE
    if result.returncode != 0:
        logger.warning("ffmpeg encoder listing failed with exit code %d", result.returncode)
        return EncodingCapability.SOFTWARE

    for capability in _candidates(platform.system()):
        if capability.codec in result.stdout:
            logger.info("Found hardware encoder: %s", capability.label)
            return capability
    logger.info("No supported hardware encoder found, using software encoding")
    return EncodingCapability.SOFTWARE

def select_capability(use_hardware_accel: bool = True,
                      runner: Optional[EngineRunner] = None) -> EncodingCapability:
    """Return the encoder to use, skipping detection when acceleration is off."""
    if not use_hardware_accel:
        logger.info("Hardware acceleration disabled, using software encoding")
        return EncodingCapability.SOFTWARE
    return detect_capability(runner)
