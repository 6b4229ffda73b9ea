"""HLS playlist rendering

Media playlists enumerate a rendition's fMP4 segments with their true
durations; the master playlist lists every playable rendition in ladder
order, highest first. Players without a bandwidth estimate start on the
first variant, so the order is significant.
"""

import math
from typing import Iterable, List, Sequence

from ..config import (
    AUDIO_CODEC, FRAME_RATE, INIT_SEGMENT_NAME, MEDIA_PLAYLIST_NAME,
    SEGMENT_DURATION, SEGMENT_NAME_PATTERN, VIDEO_CODEC
)
from ..exceptions import PackagingError
from ..models import RenditionResult

HLS_VERSION = 7

def playable(results: Iterable[RenditionResult]) -> List[RenditionResult]:
    """Keep successful renditions, raising if none remain"""
    kept = [r for r in results if r.succeeded]
    if not kept:
        raise PackagingError("No successful renditions to describe", module="manifest")
    return kept

def target_duration(durations: Sequence[float], nominal: float = SEGMENT_DURATION) -> int:
    """
    EXT-X-TARGETDURATION for a set of segments.

    The ceiling of the nominal segment length, raised only when a real
    segment would round above it.
    """
    longest = max(durations, default=0.0)
    return max(math.ceil(nominal), int(longest + 0.5))

def render_media_playlist(result: RenditionResult, nominal: float = SEGMENT_DURATION) -> str:
    """Render the VOD media playlist of one rendition"""
    if not result.succeeded:
        raise PackagingError(f"Rendition {result.name} did not succeed", module="hls")

    lines = [
        "#EXTM3U",
        f"#EXT-X-VERSION:{HLS_VERSION}",
        f"#EXT-X-TARGETDURATION:{target_duration(result.segment_durations, nominal)}",
        "#EXT-X-PLAYLIST-TYPE:VOD",
        f'#EXT-X-MAP:URI="{INIT_SEGMENT_NAME}"',
    ]
    for index, duration in enumerate(result.segment_durations):
        lines.append(f"#EXTINF:{duration:.6f},")
        lines.append(SEGMENT_NAME_PATTERN % index)
    lines.append("#EXT-X-ENDLIST")
    return "\n".join(lines) + "\n"

def render_master_playlist(results: Iterable[RenditionResult], include_audio: bool = True) -> str:
    """Render the master playlist over every successful rendition"""
    codecs = f"{VIDEO_CODEC},{AUDIO_CODEC}" if include_audio else VIDEO_CODEC
    lines = ["#EXTM3U", f"#EXT-X-VERSION:{HLS_VERSION}"]
    for result in playable(results):
        spec = result.spec
        bandwidth = spec.bandwidth if include_audio else spec.video_bitrate_kbps * 1000
        lines.append(
            f"#EXT-X-STREAM-INF:BANDWIDTH={bandwidth},RESOLUTION={spec.resolution},"
            f'CODECS="{codecs}",FRAME-RATE={FRAME_RATE:.3f}'
        )
        lines.append(f"{result.name}/{MEDIA_PLAYLIST_NAME}")
    return "\n".join(lines) + "\n"
