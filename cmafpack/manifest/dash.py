"""DASH MPD rendering

A single static period holds one video adaptation set with a
representation per successful rendition and one audio adaptation set.
Segments are muxed, so the audio representation addresses the first
rendition's segments and always carries that rendition's template and
timeline.

A fixed ``duration`` template is only emitted when every segment of a
rendition has the same length; otherwise each segment is listed in an
explicit SegmentTimeline in milliseconds.
"""

import logging
import xml.dom.minidom as minidom
import xml.etree.ElementTree as ET
from typing import Iterable, List, Sequence, Tuple

from ..config import (
    AUDIO_CHANNELS, AUDIO_CODEC, AUDIO_SAMPLE_RATE, DASH_SEGMENT_TEMPLATE,
    FRAME_RATE, INIT_SEGMENT_NAME, SEGMENT_DURATION, VIDEO_CODEC
)
from ..models import RenditionResult
from .hls import playable

logger = logging.getLogger(__name__)

MPD_NAMESPACE = "urn:mpeg:dash:schema:mpd:2011"
MPD_PROFILE = "urn:mpeg:dash:profile:isoff-main:2011"
AUDIO_CHANNEL_SCHEME = "urn:mpeg:dash:23003:3:audio_channel_configuration:2011"
TIMESCALE = 1000  # Milliseconds

def format_iso_duration(seconds: float) -> str:
    """
    Format seconds as an ISO-8601 duration, e.g. PT1H2M3.50S.

    Zero hour, minute and second components are omitted; a zero duration
    is PT0.00S.
    """
    centis = int(round(max(seconds, 0.0) * 100))
    hours, rest = divmod(centis, 360000)
    minutes, rest = divmod(rest, 6000)

    parts = ["PT"]
    if hours:
        parts.append(f"{hours}H")
    if minutes:
        parts.append(f"{minutes}M")
    if rest or not (hours or minutes):
        parts.append(f"{rest / 100:.2f}S")
    return "".join(parts)

def build_timeline(durations: Sequence[float]) -> List[Tuple[int, int]]:
    """
    Convert durations into (start, duration) pairs in milliseconds.

    Starts are rounded from the running total so rounding error never
    accumulates across segments.
    """
    entries = []
    elapsed = 0.0
    start = 0
    for duration in durations:
        elapsed += duration
        end = int(round(elapsed * TIMESCALE))
        entries.append((start, end - start))
        start = end
    return entries

def constant_duration(durations: Sequence[float]) -> int:
    """Shared segment length in milliseconds, or 0 if segments differ"""
    lengths = {int(round(d * TIMESCALE)) for d in durations}
    if len(lengths) == 1:
        return lengths.pop()
    return 0

def _add_segment_template(parent: ET.Element, result: RenditionResult) -> ET.Element:
    template = ET.SubElement(parent, "SegmentTemplate", {
        "timescale": str(TIMESCALE),
        "initialization": f"{result.name}/{INIT_SEGMENT_NAME}",
        "media": f"{result.name}/{DASH_SEGMENT_TEMPLATE}",
        "startNumber": "0",
    })
    fixed = constant_duration(result.segment_durations)
    if fixed:
        template.set("duration", str(fixed))
        return template

    timeline = ET.SubElement(template, "SegmentTimeline")
    for start, duration in build_timeline(result.segment_durations):
        ET.SubElement(timeline, "S", {"t": str(start), "d": str(duration)})
    return template

def build_mpd(
    results: Iterable[RenditionResult],
    duration: float,
    include_audio: bool = True,
    nominal: float = SEGMENT_DURATION
) -> ET.Element:
    """Build the MPD element tree"""
    renditions = playable(results)

    mpd = ET.Element("MPD", {
        "xmlns": MPD_NAMESPACE,
        "type": "static",
        "mediaPresentationDuration": format_iso_duration(duration),
        "minBufferTime": format_iso_duration(nominal),
        "profiles": MPD_PROFILE,
    })
    period = ET.SubElement(mpd, "Period", {"id": "0", "start": "PT0S"})

    video_set = ET.SubElement(period, "AdaptationSet", {
        "id": "0",
        "contentType": "video",
        "mimeType": "video/mp4",
        "segmentAlignment": "true",
        "startWithSAP": "1",
        "maxWidth": str(max(r.spec.width for r in renditions)),
        "maxHeight": str(max(r.spec.height for r in renditions)),
        "frameRate": str(FRAME_RATE),
    })
    for result in renditions:
        spec = result.spec
        bandwidth = spec.bandwidth if include_audio else spec.video_bitrate_kbps * 1000
        representation = ET.SubElement(video_set, "Representation", {
            "id": result.name,
            "codecs": VIDEO_CODEC,
            "bandwidth": str(bandwidth),
            "width": str(spec.width),
            "height": str(spec.height),
        })
        _add_segment_template(representation, result)

    if include_audio:
        first = renditions[0]
        audio_set = ET.SubElement(period, "AdaptationSet", {
            "id": "1",
            "contentType": "audio",
            "mimeType": "audio/mp4",
            "segmentAlignment": "true",
            "lang": "und",
        })
        representation = ET.SubElement(audio_set, "Representation", {
            "id": "audio",
            "codecs": AUDIO_CODEC,
            "bandwidth": str(first.spec.audio_bitrate_kbps * 1000),
            "audioSamplingRate": str(AUDIO_SAMPLE_RATE),
        })
        ET.SubElement(representation, "AudioChannelConfiguration", {
            "schemeIdUri": AUDIO_CHANNEL_SCHEME,
            "value": str(AUDIO_CHANNELS),
        })
        _add_segment_template(representation, first)
        logger.debug("Audio representation uses segments of %s", first.name)

    return mpd

def render_mpd(
    results: Iterable[RenditionResult],
    duration: float,
    include_audio: bool = True,
    nominal: float = SEGMENT_DURATION
) -> str:
    """Render the MPD document as indented UTF-8 XML text"""
    mpd = build_mpd(results, duration, include_audio, nominal)
    rough = ET.tostring(mpd, encoding="utf-8")
    return minidom.parseString(rough).toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8")
