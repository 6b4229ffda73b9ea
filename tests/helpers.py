"""Test doubles for the encoder capability"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from cmafpack.config import INIT_SEGMENT_NAME, MEDIA_PLAYLIST_NAME, SEGMENT_NAME_PATTERN
from cmafpack.encoding import Encoder
from cmafpack.models import EncodeOutcome, EncodeRequest


def write_encoder_playlist(output_dir: Path, durations: Sequence[float]) -> Path:
    """Write a playlist the way ffmpeg's fMP4 HLS muxer does"""
    lines = [
        "#EXTM3U",
        "#EXT-X-VERSION:7",
        "#EXT-X-TARGETDURATION:5",
        "#EXT-X-MEDIA-SEQUENCE:0",
        "#EXT-X-PLAYLIST-TYPE:VOD",
        f'#EXT-X-MAP:URI="{INIT_SEGMENT_NAME}"',
    ]
    for index, duration in enumerate(durations):
        lines.append(f"#EXTINF:{duration:.6f},")
        lines.append(SEGMENT_NAME_PATTERN % index)
    lines.append("#EXT-X-ENDLIST")
    playlist = output_dir / MEDIA_PLAYLIST_NAME
    playlist.write_text("\n".join(lines) + "\n")
    return playlist


class FakeEncoder(Encoder):
    """Writes fixture renditions instead of running ffmpeg.

    Attributes:
        durations: Segment durations every rendition reports
        fail: Rendition name -> error reported instead of encoding
        raw_playlist: Rendition name -> playlist text written verbatim
        skip_init: Renditions that get no initialization segment
        overrides: Rendition name -> segment durations used instead of durations
        requests: Every request received, in order
    """
    def __init__(self, durations: Sequence[float],
                 fail: Optional[Dict[str, str]] = None,
                 raw_playlist: Optional[Dict[str, str]] = None,
                 skip_init: Sequence[str] = (),
                 overrides: Optional[Dict[str, Sequence[float]]] = None):
        self.durations = list(durations)
        self.fail = fail or {}
        self.raw_playlist = raw_playlist or {}
        self.skip_init = set(skip_init)
        self.overrides = overrides or {}
        self.requests: List[EncodeRequest] = []

    def encode(self, request: EncodeRequest) -> EncodeOutcome:
        self.requests.append(request)
        name = request.spec.name
        if name in self.fail:
            return EncodeOutcome(output_dir=request.output_dir, error=self.fail[name])

        request.output_dir.mkdir(parents=True, exist_ok=True)
        if name not in self.skip_init:
            (request.output_dir / INIT_SEGMENT_NAME).write_bytes(b"init")
        durations = list(self.overrides.get(name, self.durations))
        for index in range(len(durations)):
            (request.output_dir / (SEGMENT_NAME_PATTERN % index)).write_bytes(b"moof")

        if name in self.raw_playlist:
            playlist = request.output_dir / MEDIA_PLAYLIST_NAME
            playlist.write_text(self.raw_playlist[name])
        else:
            playlist = write_encoder_playlist(request.output_dir, durations)
        return EncodeOutcome(output_dir=request.output_dir, reported_playlist=playlist)
