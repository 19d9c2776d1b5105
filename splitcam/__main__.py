"""
Command-line interface for splitting side-by-side recordings
"""
import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import DEFAULT_QUALITY, LOG_LEVEL
from .engine import EngineRunner
from .exceptions import BatchCancelledError, EngineNotFoundError, SplitcamError
from .formatting import (
    BatchProgressDisplay, print_error, print_header, print_info,
    print_check, print_summary, print_warning
)
from .logging import configure_logging
from .models import EncodingCapability
from .pipeline import BatchOrchestrator
from .settings import ProcessingConfig
from .utils import engine_version, require_dependencies
from .video.hardware import select_capability

log = logging.getLogger("splitcam")

def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="splitcam",
        description="Split 32:9 side-by-side recordings into two separate 16:9 videos"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "videos",
        nargs="+",
        type=Path,
        metavar="VIDEO",
        help="Path(s) to video file(s) to split"
    )
    parser.add_argument(
        "-f", "--format",
        dest="output_format",
        default=None,
        help="Output format (defaults to input format)"
    )
    parser.add_argument(
        "-q", "--quality",
        default=None,
        help=f"Quality preset: lossless, high or medium (default: {DEFAULT_QUALITY})"
    )
    parser.add_argument(
        "-o", "--output",
        dest="output_dir",
        type=Path,
        default=None,
        help="Output directory (defaults to each input's directory)"
    )
    parser.add_argument(
        "--no-hw-accel",
        dest="no_hw_accel",
        action="store_true",
        help="Disable hardware acceleration (force software encoding)"
    )
    parser.add_argument(
        "--continue-on-error",
        dest="continue_on_error",
        action="store_true",
        help="Continue processing remaining videos on error"
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help=f"Set logging level (default from config: {LOG_LEVEL})"
    )
    return parser.parse_args(argv)

def _setup_capability(use_hardware_accel: bool, runner: EngineRunner) -> EncodingCapability:
    capability = select_capability(use_hardware_accel, runner)
    if not use_hardware_accel:
        print_info("Hardware acceleration disabled by user")
    elif capability is EncodingCapability.SOFTWARE:
        print_info("No hardware encoder detected, using software encoding")
    else:
        print_check(f"Using hardware encoder: {capability.label}")
    return capability

def _print_install_help() -> None:
    print_warning("To install FFmpeg on macOS:   brew install ffmpeg")
    print_warning("On Ubuntu/Debian:             sudo apt-get install ffmpeg")
    print_warning("On Windows:                   https://ffmpeg.org/download.html")

def main(argv=None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    log_file = configure_logging(args.log_level or LOG_LEVEL)

    print_header(f"splitcam v{__version__} - Video Splitter")
    if log_file is not None:
        log.debug("Log file: %s", log_file)

    runner = EngineRunner()
    try:
        require_dependencies(runner)
    except EngineNotFoundError as e:
        print_error(e.message)
        _print_install_help()
        return 1
    log.info("Using %s", engine_version(runner) or runner.ffmpeg_path)

    try:
        config = ProcessingConfig.from_environment(
            quality=args.quality,
            output_format=args.output_format,
            output_dir=args.output_dir,
            use_hardware_accel=False if args.no_hw_accel else None,
            continue_on_error=args.continue_on_error,
        )
    except (SplitcamError, ValueError) as e:
        print_error(str(e))
        return 1

    capability = _setup_capability(config.use_hardware_accel, runner)

    if len(args.videos) > 1:
        print_info(f"Processing {len(args.videos)} videos")
    print_info(f"Quality: {config.quality}")
    if config.output_format:
        print_info(f"Output format: {config.output_format}")
    if config.output_dir:
        print_info(f"Output directory: {config.output_dir}")

    orchestrator = BatchOrchestrator(
        args.videos, config, runner=runner, capability=capability
    )
    try:
        with BatchProgressDisplay() as display:
            orchestrator.observer = display
            report = orchestrator.run()
    except KeyboardInterrupt:
        log.warning("Splitting interrupted by user")
        report = orchestrator.abort()
    except SplitcamError as e:
        print_error(e.message)
        return 1
    except Exception as e:
        log.exception("Splitting failed: %s", e)
        return 1

    print_summary(report, len(args.videos))
    try:
        report.raise_if_cancelled()
    except BatchCancelledError as e:
        log.warning(e.message)
        return 130
    if report.skipped and not config.continue_on_error:
        print_warning("Use --continue-on-error to continue processing remaining videos")
    return 0 if report.all_succeeded else 1

if __name__ == "__main__":
    sys.exit(main())
