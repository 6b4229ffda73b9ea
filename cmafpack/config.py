"""Configuration settings for the cmafpack packaging pipeline

This module centralizes all configuration settings including:
- Storage and log directory locations
- Encoder executables and the per-rendition timeout
- Segmenting and codec constants shared by the encoder and the manifests
- Artifact file names of the per-video directory layout

User-configurable settings come from environment variables; everything
else is an internal constant.
"""

import os
from pathlib import Path

# Root for per-video output directories when the caller gives none
STORAGE_ROOT = Path(os.environ.get("CMAFPACK_STORAGE_DIR", "/tmp/cmafpack"))

# LOG_DIR: user definable with default of "$HOME/cmafpack_logs"
LOG_DIR = Path(os.environ.get("CMAFPACK_LOG_DIR", str(Path.home() / "cmafpack_logs")))

# Logging configuration
LOG_LEVEL = "INFO"  # Default logging level; valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL

# External tools
FFMPEG_PATH = os.environ.get("CMAFPACK_FFMPEG", "ffmpeg")
FFPROBE_PATH = os.environ.get("CMAFPACK_FFPROBE", "ffprobe")

# Wall-clock limit for a single rendition encode (seconds)
ENCODE_TIMEOUT = float(os.environ.get("CMAFPACK_ENCODE_TIMEOUT", "1800"))

# Segmenting
SEGMENT_DURATION = 4.0  # Nominal fragment length handed to the encoder
MIN_SEGMENT_DURATION = 1.0 / 30  # Shortest synthesized trailing segment
MAX_SEGMENT_SCAN = 10000  # Upper bound on the fallback segment file scan

# Video encoding settings
X264_PRESET = "fast"
X264_PROFILE = "main"
FRAME_RATE = 25
GOP_SIZE = int(FRAME_RATE * SEGMENT_DURATION)  # One keyframe per segment

# Codec strings advertised in the manifests
VIDEO_CODEC = "avc1.4d401f"
AUDIO_CODEC = "mp4a.40.2"
AUDIO_SAMPLE_RATE = 48000
AUDIO_CHANNELS = 2

# Smallest rendition dimensions the resolver will produce
MIN_WIDTH = 240
MIN_HEIGHT = 144

# Directory layout
INIT_SEGMENT_NAME = "init.mp4"
SEGMENT_NAME_PATTERN = "segment_%03d.m4s"  # ffmpeg style, zero based
DASH_SEGMENT_TEMPLATE = "segment_$Number%03d$.m4s"
MEDIA_PLAYLIST_NAME = "playlist.m3u8"
HLS_MASTER_NAME = "master.m3u8"
DASH_MPD_NAME = "master.mpd"
