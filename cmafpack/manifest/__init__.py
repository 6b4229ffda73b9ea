"""Manifest rendering and publication

This package provides:
- HLS media and master playlist rendering
- DASH MPD rendering with fixed-duration or explicit-timeline templates
- Atomic publication of the rendered manifests into the video directory
"""

from .hls import render_media_playlist, render_master_playlist, target_duration
from .dash import render_mpd, format_iso_duration, build_timeline
from .publish import publish_manifests, stage_text

__all__ = [
    'render_media_playlist',
    'render_master_playlist',
    'target_duration',
    'render_mpd',
    'format_iso_duration',
    'build_timeline',
    'publish_manifests',
    'stage_text',
]
