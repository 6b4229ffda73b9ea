"""Unit tests for rendition encode orchestration"""

import tempfile
import unittest
from pathlib import Path
from cmafpack.encoding import Encoder, encode_renditions
from cmafpack.ladder import plan_ladder
from cmafpack.models import SourceVideoInfo, TimingStrategy
from cmafpack.timing import extract_segment_timings
from helpers import FakeEncoder, write_encoder_playlist

class RaisingEncoder(Encoder):
    def encode(self, request):
        raise RuntimeError("encoder crashed")

class TestEncodeRenditions(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)
        self.source = self.root / "input.mp4"
        self.ladder = plan_ladder(SourceVideoInfo(duration=10.0, width=1280, height=720))

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_encodes_in_ladder_order(self):
        encoder = FakeEncoder([4.0, 4.0, 2.0])
        results = encode_renditions(encoder, self.source, self.ladder, self.root)
        self.assertEqual([r.spec.name for r in encoder.requests],
                         ["720p", "480p", "360p", "240p"])
        self.assertEqual([r.name for r in results], ["720p", "480p", "360p", "240p"])
        self.assertTrue(all(r.succeeded for r in results))
        self.assertEqual(results[0].output_dir, self.root / "720p")
        self.assertEqual(encoder.requests[0].segment_duration, 4.0)

    def test_failure_does_not_stop_later_rungs(self):
        encoder = FakeEncoder([4.0], fail={"480p": "ffmpeg timed out after 1800s"})
        results = encode_renditions(encoder, self.source, self.ladder, self.root)
        self.assertEqual(len(encoder.requests), 4)
        self.assertEqual([r.succeeded for r in results], [True, False, True, True])
        self.assertIn("timed out", results[1].error)

    def test_missing_init_segment_fails_rendition(self):
        encoder = FakeEncoder([4.0], skip_init=["360p"])
        results = encode_renditions(encoder, self.source, self.ladder, self.root)
        failed = [r for r in results if not r.succeeded]
        self.assertEqual([r.name for r in failed], ["360p"])
        self.assertIn("init.mp4", failed[0].error)

    def test_raising_encoder_is_tolerated(self):
        results = encode_renditions(RaisingEncoder(), self.source, self.ladder, self.root)
        self.assertEqual(len(results), 4)
        self.assertFalse(any(r.succeeded for r in results))
        self.assertEqual(results[0].error, "encoder crashed")

    def test_leftover_segments_are_cleared(self):
        stale_dir = self.root / "720p"
        stale_dir.mkdir()
        for index in range(12):
            (stale_dir / f"segment_{index:03d}.m4s").write_bytes(b"old")
        write_encoder_playlist(stale_dir, [4.0] * 12)

        encoder = FakeEncoder([4.0, 4.0, 2.0], raw_playlist={"720p": "garbage\n"})
        result = encode_renditions(encoder, self.source, self.ladder[:1], self.root)[0]

        self.assertEqual(sorted(p.name for p in stale_dir.glob("segment_*.m4s")),
                         ["segment_000.m4s", "segment_001.m4s", "segment_002.m4s"])
        timed = extract_segment_timings(result, 10.0)
        self.assertEqual(timed.timing_strategy, TimingStrategy.SYNTHESIZED)
        self.assertEqual(timed.segment_durations, (4.0, 4.0, 2.0))

    def test_audio_flag_is_forwarded(self):
        encoder = FakeEncoder([4.0])
        encode_renditions(encoder, self.source, self.ladder[:1], self.root, include_audio=False)
        self.assertFalse(encoder.requests[0].include_audio)

if __name__ == "__main__":
    unittest.main()
