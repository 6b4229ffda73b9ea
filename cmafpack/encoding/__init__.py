"""Rendition encoding

This package provides:
- The encoder capability interface and its ffmpeg implementation
- ffmpeg command construction for a single rendition
- The orchestrator that encodes every rung and folds failures into results
"""

from .encoder import Encoder, FFmpegEncoder
from .command_builders import build_rendition_command
from .orchestrator import encode_rendition, encode_renditions, required_artifacts

__all__ = [
    'Encoder',
    'FFmpegEncoder',
    'build_rendition_command',
    'encode_rendition',
    'encode_renditions',
    'required_artifacts',
]
