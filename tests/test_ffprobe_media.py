"""Unit tests for ffprobe media helpers"""

import subprocess
import unittest
from pathlib import Path
from unittest.mock import MagicMock

import ffmpeg

from splitcam.exceptions import ProbeError
from splitcam.ffprobe.media import get_duration, get_video_info, try_get_duration


def _completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(["ffprobe"], returncode, stdout=stdout, stderr=stderr)


class TestGetVideoInfo(unittest.TestCase):
    def setUp(self):
        self.path = Path("/nonexistent/recording.mp4")
        self.runner = MagicMock()

    def test_selects_first_video_stream_with_dimensions(self):
        self.runner.probe.return_value = {
            "streams": [
                {"codec_type": "audio", "codec_name": "aac"},
                {"codec_type": "video", "codec_name": "mjpeg"},
                {"codec_type": "video", "codec_name": "h264", "width": 3840, "height": 1080},
            ]
        }
        info = get_video_info(self.path, self.runner)
        self.assertEqual((info.width, info.height, info.codec), (3840, 1080, "h264"))
        self.assertTrue(info.is_valid_dimensions())
        self.assertIsNone(info.file_size)
        self.assertEqual(self.runner.probe.call_args.kwargs["select_streams"], "v:0")

    def test_no_video_stream(self):
        self.runner.probe.return_value = {"streams": [{"codec_type": "audio", "codec_name": "aac"}]}
        with self.assertRaises(ProbeError):
            get_video_info(self.path, self.runner)

    def test_missing_streams_key(self):
        self.runner.probe.return_value = {}
        with self.assertRaises(ProbeError):
            get_video_info(self.path, self.runner)

    def test_ffprobe_error_carries_stderr(self):
        self.runner.probe.side_effect = ffmpeg.Error("ffprobe", b"", b"Invalid data found")
        with self.assertRaises(ProbeError) as ctx:
            get_video_info(self.path, self.runner)
        self.assertIn("Invalid data found", str(ctx.exception))

    def test_malformed_json(self):
        self.runner.probe.side_effect = ValueError("Expecting value")
        with self.assertRaises(ProbeError):
            get_video_info(self.path, self.runner)


class TestGetDuration(unittest.TestCase):
    def setUp(self):
        self.path = Path("/tmp/recording.mp4")
        self.runner = MagicMock()

    def test_parses_plain_number(self):
        self.runner.run.return_value = _completed("123.456000\n")
        self.assertAlmostEqual(get_duration(self.path, self.runner), 123.456)
        args, kwargs = self.runner.run.call_args
        self.assertEqual(kwargs["tool"], "ffprobe")

    def test_non_zero_exit(self):
        self.runner.run.return_value = _completed(returncode=1, stderr="No such file")
        with self.assertRaises(ProbeError):
            get_duration(self.path, self.runner)

    def test_unparseable_output(self):
        self.runner.run.return_value = _completed("N/A\n")
        with self.assertRaises(ProbeError):
            get_duration(self.path, self.runner)

    def test_try_get_duration_is_best_effort(self):
        self.runner.run.side_effect = FileNotFoundError("ffprobe")
        self.assertIsNone(try_get_duration(self.path, self.runner))

    def test_try_get_duration_rejects_zero(self):
        self.runner.run.return_value = _completed("0.000000\n")
        self.assertIsNone(try_get_duration(self.path, self.runner))

if __name__ == "__main__":
    unittest.main()
