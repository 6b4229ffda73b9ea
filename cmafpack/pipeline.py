"""High-level packaging pipeline

Responsibilities:
  - Plan the ladder, encode every rung and recover segment timings.
  - Render HLS and DASH manifests over the surviving renditions.
  - Publish manifests atomically, or fail the job when nothing survived.
  - Present a summary of a packaged file for the command line.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import (
    DASH_MPD_NAME, HLS_MASTER_NAME, LOG_DIR, SEGMENT_DURATION
)
from .encoding import Encoder, FFmpegEncoder, encode_renditions
from .exceptions import CmafpackError, PackagingError, PlanningError
from .formatting import (
    print_check, print_header, print_info, print_ladder,
    print_rendition_summary, print_separator, print_warning
)
from .ladder import DEFAULT_LADDER, LadderConfig, plan_ladder
from .manifest import (
    publish_manifests, render_master_playlist, render_media_playlist, render_mpd
)
from .models import ManifestSet, RenditionResult, SourceVideoInfo
from .probe import probe_source
from .timing import extract_segment_timings
from .utils import format_elapsed, get_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackagingResult:
    """Everything a finished job produced"""
    video_root: Path
    source: SourceVideoInfo
    renditions: List[RenditionResult]
    manifests: ManifestSet
    hls_master: Path
    dash_mpd: Path

    @property
    def succeeded(self) -> List[RenditionResult]:
        return [r for r in self.renditions if r.succeeded]

    @property
    def failed(self) -> List[RenditionResult]:
        return [r for r in self.renditions if not r.succeeded]


def build_manifests(
    renditions: List[RenditionResult],
    source: SourceVideoInfo,
    segment_duration: float = SEGMENT_DURATION
) -> ManifestSet:
    """
    Render every manifest for the successful renditions.

    Raises:
        PackagingError: If no rendition succeeded
    """
    playable = [r for r in renditions if r.succeeded]
    if not playable:
        raise PackagingError("All renditions failed", module="pipeline")
    return ManifestSet(
        hls_master=render_master_playlist(playable, include_audio=source.has_audio),
        dash_mpd=render_mpd(playable, source.duration, include_audio=source.has_audio,
                            nominal=segment_duration),
        media_playlists=tuple(
            (r.name, render_media_playlist(r, segment_duration)) for r in playable
        ),
    )

def _remove_stale_masters(video_root: Path) -> None:
    for name in (HLS_MASTER_NAME, DASH_MPD_NAME):
        stale = video_root / name
        if stale.exists():
            logger.info("Removing stale %s", stale)
            stale.unlink()

def package_video(
    source_path: Path,
    video_root: Path,
    source: Optional[SourceVideoInfo] = None,
    encoder: Optional[Encoder] = None,
    ladder_config: LadderConfig = DEFAULT_LADDER,
    segment_duration: float = SEGMENT_DURATION
) -> PackagingResult:
    """
    Package a source into ABR renditions with HLS and DASH manifests.

    Args:
        source_path: Uploaded source file
        video_root: Directory owned by this job for all outputs
        source: Probed source info; probed from source_path when omitted
        encoder: Encoder capability; ffmpeg when omitted
        ladder_config: Reference ladder to plan from
        segment_duration: Nominal segment length in seconds

    Returns:
        PackagingResult: Renditions, rendered manifests and published paths

    Raises:
        MetadataError: If the source cannot be probed
        PlanningError: If the source has no usable dimensions or duration
        PackagingError: If the video directory cannot be prepared, or every
            rendition failed; no manifest is written then
        ManifestWriteError: If manifests cannot be published
    """
    source = source or probe_source(source_path)
    if source.duration < 0:
        raise PlanningError(f"Negative source duration {source.duration}", module="pipeline")
    encoder = encoder or FFmpegEncoder()

    ladder = plan_ladder(source, ladder_config)
    print_ladder(ladder)

    try:
        video_root.mkdir(parents=True, exist_ok=True)
        _remove_stale_masters(video_root)
    except OSError as e:
        raise PackagingError(f"Could not prepare {video_root}: {e}", module="pipeline") from e

    renditions = encode_renditions(encoder, source_path, ladder, video_root,
                                   segment_duration, include_audio=source.has_audio)
    renditions = [
        extract_segment_timings(r, source.duration, segment_duration) for r in renditions
    ]

    failed = [r.name for r in renditions if not r.succeeded]
    if len(failed) == len(renditions):
        logger.error("All %d renditions failed for %s", len(renditions), source_path.name)
        raise PackagingError(f"All renditions failed for {source_path.name}", module="pipeline")
    if failed:
        print_warning(f"Excluded failed renditions: {', '.join(failed)}")

    manifests = build_manifests(renditions, source, segment_duration)
    paths = publish_manifests(video_root, manifests)
    return PackagingResult(
        video_root=video_root,
        source=source,
        renditions=renditions,
        manifests=manifests,
        hls_master=paths["hls"],
        dash_mpd=paths["dash"],
    )

def _setup_job_logging(source_path: Path) -> tuple[logging.FileHandler, Path]:
    """Setup logging for a packaging session."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / f"{source_path.stem}_{get_timestamp()}.log"

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logging.getLogger("cmafpack").addHandler(file_handler)

    return file_handler, log_file

def _build_summary(result: PackagingResult, source_path: Path, start_time: float) -> dict:
    """Build the packaging summary dictionary."""
    elapsed = time.time() - start_time

    print_header("Packaging Summary")
    print_rendition_summary(result.renditions)
    print_check(f"HLS master:  {result.hls_master}")
    print_check(f"DASH MPD:    {result.dash_mpd}")
    print_check(f"Packaging time: {format_elapsed(elapsed)}")
    print_separator()

    return {
        "filename": source_path.name,
        "video_root": result.video_root,
        "hls_master": result.hls_master,
        "dash_mpd": result.dash_mpd,
        "renditions": [r.name for r in result.succeeded],
        "failed": [r.name for r in result.failed],
        "packaging_time": elapsed,
    }

def process_file(
    source_path: Path,
    output_root: Path,
    encoder: Optional[Encoder] = None,
    ladder_config: LadderConfig = DEFAULT_LADDER
) -> Optional[dict]:
    """
    Package a single source file into output_root/<source stem>

    Returns:
        Optional[dict]: Packaging summary if successful, None on failure
    """
    file_handler, log_file = _setup_job_logging(source_path)
    try:
        start_time = time.time()
        print_header("Starting Packaging")
        logger.info("Beginning packaging of: %s", source_path.name)
        logger.info("Packaging log: %s", log_file.name)
        video_root = output_root / source_path.stem
        print_info(f"Input path:  {source_path.resolve()}")
        print_info(f"Output path: {video_root.resolve()}")
        print_separator()

        try:
            result = package_video(source_path, video_root, encoder=encoder,
                                   ladder_config=ladder_config)
        except CmafpackError as e:
            logger.error("Packaging failed: %s", e)
            return None
        return _build_summary(result, source_path, start_time)
    finally:
        logging.getLogger("cmafpack").removeHandler(file_handler)
        file_handler.close()
