"""Per-segment timing extraction

Segment boundaries land on keyframes, so the encoder's own playlist is
the only reliable record of how long each fragment really is. When that
playlist is missing or yields nothing, durations are synthesized from
the number of segment files on disk.
"""

import logging
import math
import re
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from .config import MAX_SEGMENT_SCAN, MIN_SEGMENT_DURATION, SEGMENT_DURATION, SEGMENT_NAME_PATTERN
from .models import RenditionResult, TimingStrategy

logger = logging.getLogger(__name__)

EXTINF_RE = re.compile(r"^#EXTINF:\s*([0-9]*\.?[0-9]+)")

def parse_playlist_durations(playlist: Path) -> List[float]:
    """
    Read the EXTINF durations of a playlist in file order.

    Unreadable files and malformed directives yield no entries rather
    than raising.
    """
    try:
        text = playlist.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read encoder playlist %s: %s", playlist, e)
        return []

    durations = []
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("#EXTINF:"):
            continue
        match = EXTINF_RE.match(line)
        if not match:
            logger.debug("Skipping malformed directive in %s: %s", playlist.name, line)
            continue
        duration = float(match.group(1))
        if duration <= 0 or not math.isfinite(duration):
            logger.debug("Skipping non-positive duration in %s: %s", playlist.name, line)
            continue
        durations.append(duration)
    return durations

def count_segments(output_dir: Path, limit: int = MAX_SEGMENT_SCAN) -> int:
    """Count consecutively numbered segment files, stopping at the first gap"""
    count = 0
    while count < limit and (output_dir / (SEGMENT_NAME_PATTERN % count)).is_file():
        count += 1
    return count

def synthesize_durations(
    segment_count: int,
    total_duration: float,
    target: float = SEGMENT_DURATION
) -> List[float]:
    """
    Build nominal durations for a number of segments.

    Every segment but the last gets the target length; the last gets
    whatever remains of the total, kept within (0, target].
    """
    if segment_count <= 0:
        return []
    last = total_duration - (segment_count - 1) * target
    last = max(MIN_SEGMENT_DURATION, min(target, last))
    return [target] * (segment_count - 1) + [last]

def covers_source(
    durations: Sequence[float],
    total_duration: float,
    target: float = SEGMENT_DURATION
) -> bool:
    """True when the durations add up to the source within one segment"""
    return abs(sum(durations) - total_duration) <= target

def extract_segment_timings(
    result: RenditionResult,
    total_duration: float,
    target: float = SEGMENT_DURATION,
    playlist: Optional[Path] = None
) -> RenditionResult:
    """
    Attach segment durations to a successful rendition.

    Args:
        result: Rendition as produced by the encode orchestrator
        total_duration: Source duration in seconds
        target: Nominal segment length handed to the encoder
        playlist: Encoder playlist override; defaults to the one it reported

    Returns:
        RenditionResult: A copy carrying durations and the strategy used.
        Failed renditions are returned unchanged. A rendition left with no
        segments, or whose segments do not add up to the source duration
        within one target length, is marked failed.
    """
    if not result.succeeded:
        return result

    playlist = playlist or result.reported_playlist
    if playlist is not None and playlist.is_file():
        durations = parse_playlist_durations(playlist)
        if durations and covers_source(durations, total_duration, target):
            logger.info("Rendition %s: %d segments from encoder playlist (%.3fs)",
                        result.name, len(durations), sum(durations))
            return replace(result, segment_durations=tuple(durations),
                           timing_strategy=TimingStrategy.AUTHORITATIVE)
        elif durations:
            logger.warning("Encoder playlist for %s covers %.3fs of a %.3fs source",
                           result.name, sum(durations), total_duration)
        else:
            logger.warning("Encoder playlist for %s has no usable durations", result.name)
    else:
        logger.warning("No encoder playlist for %s", result.name)

    count = count_segments(result.output_dir)
    durations = synthesize_durations(count, total_duration, target)
    if not durations:
        reason = "no segments produced"
        logger.error("Rendition %s failed: %s", result.name, reason)
        return replace(result, succeeded=False, error=reason)
    if not covers_source(durations, total_duration, target):
        reason = f"segment durations cover {sum(durations):.3f} of {total_duration:.3f}s"
        logger.error("Rendition %s failed: %s", result.name, reason)
        return replace(result, succeeded=False, error=reason)

    logger.warning("Rendition %s: synthesized durations for %d segment files",
                   result.name, count)
    return replace(result, segment_durations=tuple(durations),
                   timing_strategy=TimingStrategy.SYNTHESIZED)
