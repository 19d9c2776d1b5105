"""FFProbe utilities for media file analysis

This package provides utilities for:
- Describing the video stream of an input file
- Reading the container duration
"""

from .media import get_video_info, get_duration, try_get_duration

__all__ = [
    'get_video_info',
    'get_duration',
    'try_get_duration',
]
