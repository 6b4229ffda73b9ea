"""Rendition encode orchestration

Encodes each planned rung sequentially, in ladder order, into its own
subdirectory of the video root, emptied before the encode starts. Every
rung yields a RenditionResult; a failed rung is recorded and the next
rung proceeds.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Tuple

from ..config import INIT_SEGMENT_NAME, MEDIA_PLAYLIST_NAME, SEGMENT_DURATION
from ..formatting import print_check, print_error
from ..models import EncodeOutcome, EncodeRequest, QualitySpec, RenditionResult
from .encoder import Encoder

logger = logging.getLogger(__name__)

def required_artifacts(output_dir: Path) -> Tuple[Path, Path]:
    """Files a rendition directory must contain after a successful encode"""
    return output_dir / INIT_SEGMENT_NAME, output_dir / MEDIA_PLAYLIST_NAME

def _failed(spec: QualitySpec, output_dir: Path, reason: str) -> RenditionResult:
    logger.error("Rendition %s failed: %s", spec.name, reason)
    print_error(f"Rendition {spec.name} failed")
    return RenditionResult(spec=spec, output_dir=output_dir, succeeded=False, error=reason)

def encode_rendition(
    encoder: Encoder,
    source: Path,
    spec: QualitySpec,
    video_root: Path,
    segment_duration: float = SEGMENT_DURATION,
    include_audio: bool = True
) -> RenditionResult:
    """
    Encode a single rung and verify its artifacts.

    Returns:
        RenditionResult: succeeded=True only if the encoder reported success
        and both the initialization segment and the index exist
    """
    output_dir = video_root / spec.name
    request = EncodeRequest(
        source=source,
        spec=spec,
        output_dir=output_dir,
        segment_duration=segment_duration,
        include_audio=include_audio,
    )
    logger.info("Encoding rendition %s (%s, %dk video, %dk audio)",
                spec.name, spec.resolution, spec.video_bitrate_kbps, spec.audio_bitrate_kbps)

    # The rendition directory holds only this encode's output
    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
    except OSError as e:
        return _failed(spec, output_dir, f"could not prepare {output_dir}: {e}")

    try:
        outcome = encoder.encode(request)
    except Exception as e:
        # Encoders should report failure in the outcome; tolerate those that raise
        logger.exception("Encoder raised for %s", spec.name)
        outcome = EncodeOutcome(output_dir=output_dir, error=str(e) or type(e).__name__)

    if not outcome.ok:
        return _failed(spec, output_dir, outcome.error)

    missing = [p.name for p in required_artifacts(output_dir) if not p.is_file()]
    if missing:
        return _failed(spec, output_dir, f"missing {', '.join(missing)}")

    print_check(f"Encoded rendition {spec.name} ({spec.resolution})")
    return RenditionResult(
        spec=spec,
        output_dir=output_dir,
        succeeded=True,
        reported_playlist=outcome.reported_playlist,
    )

def encode_renditions(
    encoder: Encoder,
    source: Path,
    ladder: List[QualitySpec],
    video_root: Path,
    segment_duration: float = SEGMENT_DURATION,
    include_audio: bool = True
) -> List[RenditionResult]:
    """
    Encode every rung of the ladder in order.

    Returns:
        List[RenditionResult]: One result per rung, in ladder order
    """
    results = [
        encode_rendition(encoder, source, spec, video_root, segment_duration, include_audio)
        for spec in ladder
    ]
    succeeded = sum(1 for r in results if r.succeeded)
    logger.info("Encoded %d of %d renditions", succeeded, len(results))
    return results
