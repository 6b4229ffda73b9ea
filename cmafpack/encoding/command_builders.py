"""Helper functions for building ffmpeg commands"""

import logging
from pathlib import Path
from typing import List, Optional

from ..config import (
    FFMPEG_PATH, X264_PRESET, X264_PROFILE, FRAME_RATE, GOP_SIZE,
    AUDIO_CHANNELS, INIT_SEGMENT_NAME, SEGMENT_NAME_PATTERN, MEDIA_PLAYLIST_NAME
)
from ..models import EncodeRequest

log = logging.getLogger(__name__)

def build_rendition_command(request: EncodeRequest, ffmpeg_path: Optional[str] = None) -> List[str]:
    """Build ffmpeg command encoding one rendition into fMP4 HLS segments"""
    spec = request.spec
    output_dir = Path(request.output_dir)
    video_rate = f"{spec.video_bitrate_kbps}k"

    cmd = [
        ffmpeg_path or FFMPEG_PATH, "-hide_banner", "-loglevel", "warning", "-y",
        "-i", str(request.source),
        "-map", "0:v:0",
    ]
    if request.include_audio:
        cmd.extend(["-map", "0:a:0?"])

    cmd.extend([
        "-c:v", "libx264",
        "-preset", X264_PRESET,
        "-profile:v", X264_PROFILE,
        "-b:v", video_rate,
        "-maxrate", video_rate,
        "-bufsize", f"{spec.video_bitrate_kbps * 2}k",
        "-vf", f"scale={spec.width}:{spec.height}",
        "-r", str(FRAME_RATE),
        "-g", str(GOP_SIZE),
        "-keyint_min", str(GOP_SIZE),
        "-sc_threshold", "0",
    ])

    if request.include_audio:
        cmd.extend([
            "-c:a", "aac",
            "-b:a", f"{spec.audio_bitrate_kbps}k",
            "-ac", str(AUDIO_CHANNELS),
        ])
    else:
        cmd.append("-an")

    cmd.extend([
        "-f", "hls",
        "-hls_time", f"{request.segment_duration:g}",
        "-hls_playlist_type", "vod",
        "-hls_segment_type", "fmp4",
        "-hls_fmp4_init_filename", INIT_SEGMENT_NAME,
        "-hls_segment_filename", str(output_dir / SEGMENT_NAME_PATTERN),
        str(output_dir / MEDIA_PLAYLIST_NAME),
    ])
    return cmd
