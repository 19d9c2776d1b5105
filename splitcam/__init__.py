"""
splitcam - Split side-by-side dual-camera recordings

This package splits a 3840x1080 recording into its two 1920x1080 halves:
- Detects the best available hardware H.264 encoder
- Plans ffmpeg arguments for the selected quality preset
- Runs one ffmpeg process per half, streaming its progress
- Processes batches of files with per-file error isolation
- Supports cooperative cancellation between pipeline stages

All video work is done by ffmpeg; splitcam only builds arguments and
reads the diagnostic text ffmpeg writes while encoding.
"""

__version__ = "0.1.0"
