"""
cmafpack - Adaptive bitrate packaging for CMAF renditions

This package turns a single source video into a streamable set of assets:
- Plans a quality ladder from the source's native resolution
- Encodes each rung into fragmented MP4 segments via ffmpeg
- Recovers true per-segment durations from the encoder output
- Writes HLS master/media playlists and a DASH MPD describing the
  same segments

Renditions are encoded sequentially and a single failed rung never
aborts the job; only a job with no surviving renditions is fatal.
"""

__version__ = "0.1.0"
