"""Unit tests for the ffmpeg encoder adapter"""

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch
from cmafpack.encoding import FFmpegEncoder
from cmafpack.exceptions import CommandExecutionError, EncoderTimeoutError
from cmafpack.models import EncodeRequest, QualitySpec

class TestFFmpegEncoder(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)
        self.request = EncodeRequest(
            source=self.root / "input.mp4",
            spec=QualitySpec("360p", 640, 360, 800, 96),
            output_dir=self.root / "360p",
            segment_duration=4.0,
        )

    def tearDown(self):
        self._tmpdir.cleanup()

    @patch("cmafpack.command_jobs.run_cmd")
    def test_success_reports_playlist(self, mock_run_cmd):
        def fake_run(cmd, timeout=None):
            (self.root / "360p" / "playlist.m3u8").write_text("#EXTM3U\n")
            return subprocess.CompletedProcess(cmd, 0, "", "")
        mock_run_cmd.side_effect = fake_run

        outcome = FFmpegEncoder(timeout=60).encode(self.request)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.reported_playlist, self.root / "360p" / "playlist.m3u8")
        self.assertEqual(mock_run_cmd.call_args.kwargs["timeout"], 60)

    @patch("cmafpack.command_jobs.run_cmd")
    def test_success_without_playlist(self, mock_run_cmd):
        mock_run_cmd.return_value = subprocess.CompletedProcess([], 0, "", "")
        outcome = FFmpegEncoder().encode(self.request)
        self.assertTrue(outcome.ok)
        self.assertIsNone(outcome.reported_playlist)

    @patch("cmafpack.command_jobs.run_cmd")
    def test_timeout_is_reported_not_raised(self, mock_run_cmd):
        mock_run_cmd.side_effect = EncoderTimeoutError("ffmpeg timed out after 60s")
        outcome = FFmpegEncoder(timeout=60).encode(self.request)
        self.assertFalse(outcome.ok)
        self.assertIn("timed out", outcome.error)

    @patch("cmafpack.command_jobs.run_cmd")
    def test_failure_includes_encoder_output(self, mock_run_cmd):
        mock_run_cmd.side_effect = CommandExecutionError("ffmpeg exited with code 1",
                                                         exit_code=1, output="Unknown encoder")
        outcome = FFmpegEncoder().encode(self.request)
        self.assertFalse(outcome.ok)
        self.assertIn("Unknown encoder", outcome.error)
        self.assertIn("360p", outcome.error)

if __name__ == "__main__":
    unittest.main()
