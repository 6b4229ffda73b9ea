"""Encoder capability interface and the ffmpeg implementation.

The orchestrator only depends on ``Encoder.encode``; tests substitute an
encoder that writes fixture segments instead of running a media toolchain.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..command_jobs import EncodeJob
from ..config import ENCODE_TIMEOUT, FFMPEG_PATH, MEDIA_PLAYLIST_NAME
from ..exceptions import CmafpackError, CommandExecutionError
from ..models import EncodeOutcome, EncodeRequest
from .command_builders import build_rendition_command

logger = logging.getLogger(__name__)

class Encoder(ABC):
    """Base encoder interface that all encoders must implement."""

    @abstractmethod
    def encode(self, request: EncodeRequest) -> EncodeOutcome:
        """Encode one rendition into ``request.output_dir``.

        Args:
            request: Source, resolved rung and output directory

        Returns:
            EncodeOutcome: Success, or the reason the rendition failed.
            Implementations report failure in the outcome instead of
            raising.
        """

class FFmpegEncoder(Encoder):
    """Encodes renditions with ffmpeg's fMP4 HLS muxer.

    Attributes:
        ffmpeg_path: ffmpeg executable
        timeout: Wall-clock limit per rendition in seconds
    """
    def __init__(self, ffmpeg_path: Optional[str] = None, timeout: Optional[float] = None):
        self.ffmpeg_path = ffmpeg_path or FFMPEG_PATH
        self.timeout = ENCODE_TIMEOUT if timeout is None else timeout

    def encode(self, request: EncodeRequest) -> EncodeOutcome:
        request.output_dir.mkdir(parents=True, exist_ok=True)
        cmd = build_rendition_command(request, self.ffmpeg_path)
        formatted_cmd = " \\\n    ".join(cmd)
        logger.info("Encoding command for %s:\n%s", request.spec.name, formatted_cmd)

        job = EncodeJob(cmd, request.spec.name, timeout=self.timeout)
        try:
            job.execute()
        except CommandExecutionError as e:
            detail = f"{e.message}: {e.output}" if e.output else e.message
            return EncodeOutcome(output_dir=request.output_dir, error=detail)
        except CmafpackError as e:
            return EncodeOutcome(output_dir=request.output_dir, error=e.message)

        playlist = request.output_dir / MEDIA_PLAYLIST_NAME
        return EncodeOutcome(
            output_dir=request.output_dir,
            reported_playlist=playlist if playlist.is_file() else None,
        )
