"""Unit tests for segment timing extraction

This test suite verifies the encoder playlist parser, the synthesized
fallback and the choice between them.
"""

import tempfile
import unittest
from pathlib import Path
from cmafpack.models import QualitySpec, RenditionResult, TimingStrategy
from cmafpack.timing import (
    count_segments, extract_segment_timings, parse_playlist_durations, synthesize_durations
)
from helpers import write_encoder_playlist

SPEC = QualitySpec("480p", 852, 480, 1200, 96)

class TestParsePlaylist(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_durations_in_file_order(self):
        playlist = write_encoder_playlist(self.root, [4.004, 3.97, 2.1])
        self.assertEqual(parse_playlist_durations(playlist), [4.004, 3.97, 2.1])

    def test_malformed_entries_are_skipped(self):
        playlist = self.root / "playlist.m3u8"
        playlist.write_text(
            "#EXTM3U\n"
            "#EXTINF:4.2,\nsegment_000.m4s\n"
            "#EXTINF:abc,\nsegment_001.m4s\n"
            "#EXTINF:0,\nsegment_002.m4s\n"
            "#EXTINF:3,title\nsegment_003.m4s\n"
        )
        self.assertEqual(parse_playlist_durations(playlist), [4.2, 3.0])

    def test_unreadable_playlist_yields_nothing(self):
        playlist = self.root / "playlist.m3u8"
        playlist.write_bytes(b"\xff\xfe\xfa")
        self.assertEqual(parse_playlist_durations(playlist), [])
        self.assertEqual(parse_playlist_durations(self.root / "missing.m3u8"), [])

class TestSynthesize(unittest.TestCase):
    def test_last_segment_takes_remainder(self):
        self.assertEqual(synthesize_durations(3, 10.0, 4.0), [4.0, 4.0, 2.0])

    def test_exact_multiple(self):
        self.assertEqual(synthesize_durations(3, 12.0, 4.0), [4.0, 4.0, 4.0])

    def test_last_segment_is_clamped(self):
        self.assertEqual(synthesize_durations(2, 30.0, 4.0), [4.0, 4.0])
        self.assertAlmostEqual(synthesize_durations(3, 8.0, 4.0)[-1], 1 / 30)

    def test_no_segments(self):
        self.assertEqual(synthesize_durations(0, 10.0), [])

class TestExtractTimings(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)

    def tearDown(self):
        self._tmpdir.cleanup()

    def _result(self, playlist=None, succeeded=True):
        return RenditionResult(spec=SPEC, output_dir=self.root, succeeded=succeeded,
                               reported_playlist=playlist)

    def _write_segments(self, count):
        for index in range(count):
            (self.root / f"segment_{index:03d}.m4s").write_bytes(b"moof")

    def test_count_stops_at_first_gap(self):
        self._write_segments(2)
        (self.root / "segment_003.m4s").write_bytes(b"moof")
        self.assertEqual(count_segments(self.root), 2)
        self.assertEqual(count_segments(self.root, limit=1), 1)

    def test_encoder_playlist_is_authoritative(self):
        self._write_segments(3)
        playlist = write_encoder_playlist(self.root, [4.08, 3.92, 2.0])
        result = extract_segment_timings(self._result(playlist), 10.0)
        self.assertEqual(result.timing_strategy, TimingStrategy.AUTHORITATIVE)
        self.assertEqual(result.segment_durations, (4.08, 3.92, 2.0))
        self.assertLessEqual(abs(result.total_duration - 10.0), 4.0)

    def test_empty_playlist_falls_back(self):
        self._write_segments(3)
        playlist = self.root / "playlist.m3u8"
        playlist.write_text("#EXTM3U\n#EXT-X-ENDLIST\n")
        result = extract_segment_timings(self._result(playlist), 10.0)
        self.assertEqual(result.timing_strategy, TimingStrategy.SYNTHESIZED)
        self.assertEqual(result.segment_durations, (4.0, 4.0, 2.0))

    def test_missing_playlist_falls_back(self):
        self._write_segments(8)
        result = extract_segment_timings(self._result(), 30.0)
        self.assertEqual(result.timing_strategy, TimingStrategy.SYNTHESIZED)
        self.assertEqual(result.segment_count, 8)
        self.assertAlmostEqual(result.total_duration, 30.0)

    def test_short_playlist_falls_back_to_segment_files(self):
        self._write_segments(8)
        playlist = write_encoder_playlist(self.root, [4.0, 4.0])
        result = extract_segment_timings(self._result(playlist), 30.0)
        self.assertTrue(result.succeeded)
        self.assertEqual(result.timing_strategy, TimingStrategy.SYNTHESIZED)
        self.assertEqual(result.segment_count, 8)

    def test_segments_short_of_source_mark_rendition_failed(self):
        self._write_segments(2)
        playlist = write_encoder_playlist(self.root, [4.0, 4.0])
        result = extract_segment_timings(self._result(playlist), 30.0)
        self.assertFalse(result.succeeded)
        self.assertEqual(result.error, "segment durations cover 8.000 of 30.000s")
        self.assertEqual(result.segment_durations, ())

    def test_no_segments_marks_rendition_failed(self):
        result = extract_segment_timings(self._result(), 10.0)
        self.assertFalse(result.succeeded)
        self.assertEqual(result.error, "no segments produced")

    def test_failed_rendition_is_untouched(self):
        original = self._result(succeeded=False)
        self.assertIs(extract_segment_timings(original, 10.0), original)

if __name__ == "__main__":
    unittest.main()
