"""Unit tests for ffmpeg progress parsing"""

import pytest

from splitcam.models import EncodingProgress
from splitcam.video.progress import (
    ProgressParser, parse_duration, parse_progress_line, parse_timestamp
)

STATUS_LINE = (
    "frame= 1234 fps= 45.0 q=28.0 size=  18234kB time=00:00:45.67 "
    "bitrate=3265.5kbits/s speed=1.23x"
)


def test_parse_duration():
    line = "  Duration: 00:10:45.20, start: 0.000000, bitrate: 5000 kb/s"
    assert parse_duration(line) == pytest.approx(645.20)


def test_parse_duration_absent():
    assert parse_duration("Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'in.mp4':") is None


@pytest.mark.parametrize("text,expected", [
    ("00:10:45.20", 645.20),
    ("01:00:00.5", 3600.50),
    ("01:00:00.500", 3600.50),
    ("00:00:01.567", 1.56),
    ("00:00:01.999", 1.99),
])
def test_parse_timestamp_keeps_hundredths(text, expected):
    assert parse_timestamp(text) == pytest.approx(expected)


def test_parse_timestamp_rejects_garbage():
    assert parse_timestamp("N/A") is None


def test_parse_progress_line():
    progress = parse_progress_line(STATUS_LINE, 645.20)

    assert progress.frame == 1234
    assert progress.fps == pytest.approx(45.0)
    assert progress.speed == pytest.approx(1.23)
    assert progress.current_time == pytest.approx(45.67)
    assert progress.percentage == pytest.approx(7.08, abs=0.01)


def test_line_without_time_is_ignored():
    line = "frame=  500 fps= 30.0 q=28.0 size=   1024kB bitrate=N/A speed=2.00x"
    assert parse_progress_line(line, 90.0) is None
    assert ProgressParser(90.0).feed(line) is None


def test_missing_fields_default_to_zero():
    progress = parse_progress_line("size=   1024kB time=00:00:10.00 bitrate=N/A speed=N/A", 100.0)
    assert progress.frame == 0
    assert progress.fps == 0.0
    assert progress.speed == 0.0
    assert progress.percentage == pytest.approx(10.0)


def test_malformed_number_falls_back_to_zero():
    progress = parse_progress_line("frame=   10 fps=1.2.3 time=00:00:01.00", 10.0)
    assert progress.fps == 0.0
    assert progress.frame == 10


def test_parser_latches_duration():
    parser = ProgressParser()
    assert parser.feed("  Duration: 00:01:30.00, start: 0.000000, bitrate: 5000 kb/s") is None
    assert parser.duration_known
    assert parser.total_duration == pytest.approx(90.0)

    snapshots = [
        parser.feed(f"frame=  {n * 100} fps= 30.0 size=   1024kB time=00:00:{n * 10:02d}.00 speed=2.00x")
        for n in range(1, 4)
    ]
    parser.feed("  Duration: 00:05:00.00, start: 0.000000, bitrate: 5000 kb/s")
    later = parser.feed("frame=  400 fps= 30.0 time=00:00:40.00 speed=2.00x")

    assert all(s.total_duration == pytest.approx(90.0) for s in snapshots + [later])
    assert parser.total_duration == pytest.approx(90.0)
    assert snapshots[2].percentage == pytest.approx(33.33, abs=0.01)


def test_seeded_parser_ignores_duration_lines():
    parser = ProgressParser(total_duration=60.0)
    parser.feed("  Duration: 00:10:00.00, start: 0.000000")
    progress = parser.feed("frame=  30 fps=30 time=00:00:30.00 speed=1.0x")
    assert progress.total_duration == pytest.approx(60.0)
    assert progress.percentage == pytest.approx(50.0)


@pytest.mark.parametrize("seed", [0.0, -1.0])
def test_non_positive_seed_leaves_duration_open(seed):
    parser = ProgressParser(total_duration=seed)
    assert not parser.duration_known
    parser.feed("  Duration: 00:01:00.00, start: 0.000000")
    progress = parser.feed("frame=  30 fps=30 time=00:00:30.00 speed=1.0x")
    assert progress.total_duration == pytest.approx(60.0)
    assert progress.percentage == pytest.approx(50.0)


def test_progress_without_duration():
    parser = ProgressParser()
    progress = parser.feed("frame=  30 fps=30 time=00:00:30.00 speed=1.5x")
    assert progress is not None
    assert progress.percentage == 0.0
    assert progress.total_duration == 0.0
    assert progress.eta is None


def test_percentage_is_clamped():
    progress = ProgressParser(total_duration=90.0).feed("frame= 10 time=00:02:00.00 speed=1.0x")
    assert progress.percentage == 100.0


def test_eta():
    progress = EncodingProgress(current_time=30.0, total_duration=90.0, speed=2.0)
    assert progress.eta == pytest.approx(30.0)


def test_eta_undefined_without_speed():
    assert EncodingProgress(current_time=30.0, total_duration=90.0, speed=0.0).eta is None


def test_eta_floors_at_zero():
    assert EncodingProgress(current_time=120.0, total_duration=90.0, speed=2.0).eta == 0.0
