"""Aspect-ratio preserving rendition dimensions

Reference rungs are defined for 16:9 content. Every rendition instead
keeps the source's own aspect ratio, is even in both dimensions (a 4:2:0
chroma requirement of H.264) and never exceeds the source.
"""

import logging
from typing import Tuple

from ..config import MIN_HEIGHT, MIN_WIDTH
from ..exceptions import PlanningError

logger = logging.getLogger(__name__)

# Passes allowed for the result to settle on a fixed point
MAX_PASSES = 8
# Largest aspect ratio drift accepted before trying a smaller height
ASPECT_TOLERANCE = 0.01

def _even(value: float) -> int:
    """Round down to an even integer, never below 2"""
    value = int(value)
    return max(2, value - value % 2)

def _fit(max_width: int, max_height: int, ratio: float) -> Tuple[int, int]:
    """
    Largest even frame within the bounds that keeps the aspect ratio.

    Heights are tried from the bound downward, deriving the width from
    each. When no height stays within tolerance the closest pair wins.
    """
    best = None
    for height in range(max_height, 1, -2):
        width = min(_even(round(height * ratio)), max_width)
        error = abs(width / height - ratio)
        if error < ASPECT_TOLERANCE:
            return width, height
        if best is None or error < best[0]:
            best = (error, width, height)
    return best[1], best[2]

def _resolve_once(
    ref_width: int,
    ref_height: int,
    source_width: int,
    source_height: int,
    min_width: int,
    min_height: int
) -> Tuple[int, int]:
    ratio = source_width / source_height

    # Keep the reference height unless that makes the frame too wide
    width, height = _even(round(ref_height * ratio)), _even(ref_height)
    if width > ref_width:
        width, height = _even(ref_width), _even(round(ref_width / ratio))

    if height < min_height:
        height = _even(min_height)
        width = _even(round(height * ratio))
    if width < min_width:
        width = _even(min_width)
        height = _even(round(width / ratio))

    # Never upscale
    return _fit(min(width, _even(source_width)), min(height, _even(source_height)), ratio)

def resolve_dimensions(
    ref_width: int,
    ref_height: int,
    source_width: int,
    source_height: int,
    min_width: int = MIN_WIDTH,
    min_height: int = MIN_HEIGHT
) -> Tuple[int, int]:
    """
    Fit a reference rung to the source's aspect ratio.

    Args:
        ref_width: Reference rung width
        ref_height: Reference rung height
        source_width: Source width in pixels
        source_height: Source height in pixels
        min_width: Floor for the output width
        min_height: Floor for the output height

    Returns:
        Tuple[int, int]: Even (width, height), at most the source dimensions

    Raises:
        PlanningError: If either source dimension is below 2 pixels, since
            no even frame fits inside it
    """
    if source_width < 2 or source_height < 2:
        raise PlanningError(
            f"Cannot resolve dimensions for a {source_width}x{source_height} source",
            module="dimensions"
        )

    width, height = _resolve_once(ref_width, ref_height, source_width, source_height,
                                  min_width, min_height)
    # Settle so that resolving an already resolved pair is a no-op
    for _ in range(MAX_PASSES):
        settled = _resolve_once(width, height, source_width, source_height,
                                min_width, min_height)
        if settled == (width, height):
            break
        width, height = settled

    logger.debug("Resolved %dx%d for %dx%d source -> %dx%d",
                 ref_width, ref_height, source_width, source_height, width, height)
    return width, height
