"""Source probing

Reads the dimensions, duration and audio presence of an uploaded source
with ffprobe (through ffmpeg-python).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import ffmpeg

from .config import FFPROBE_PATH
from .exceptions import MetadataError
from .models import SourceVideoInfo

logger = logging.getLogger(__name__)

def _first_stream(data: Dict[str, Any], codec_type: str) -> Optional[Dict[str, Any]]:
    return next((s for s in data.get("streams", []) if s.get("codec_type") == codec_type), None)

def _duration(data: Dict[str, Any], video: Dict[str, Any]) -> float:
    """Container duration, falling back to the video stream's"""
    for raw in (data.get("format", {}).get("duration"), video.get("duration")):
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        if value > 0:
            return value
    raise MetadataError("No valid duration found", module="probe")

def probe_source(path: Path, ffprobe_path: Optional[str] = None) -> SourceVideoInfo:
    """
    Probe a source file.

    Raises:
        MetadataError: If ffprobe fails or the file has no usable video stream
    """
    try:
        data = ffmpeg.probe(str(path), cmd=ffprobe_path or FFPROBE_PATH)
    except ffmpeg.Error as e:
        stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
        raise MetadataError(f"ffprobe failed for {path}: {stderr.strip()}", module="probe") from e
    except OSError as e:
        raise MetadataError(f"Could not run ffprobe: {e}", module="probe") from e

    video = _first_stream(data, "video")
    if video is None:
        raise MetadataError(f"No video stream in {path}", module="probe")

    try:
        width = int(video["width"])
        height = int(video["height"])
    except (KeyError, TypeError, ValueError) as e:
        raise MetadataError(f"Missing video dimensions in {path}", module="probe") from e

    info = SourceVideoInfo(
        duration=_duration(data, video),
        width=width,
        height=height,
        has_audio=_first_stream(data, "audio") is not None,
    )
    logger.info("Probed %s: %dx%d, %.2fs, audio=%s",
                path.name, info.width, info.height, info.duration, info.has_audio)
    return info
