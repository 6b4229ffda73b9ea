"""Quality ladder planning

Selects the rungs of the reference ladder that fit under the source
height and resolves each against the source's aspect ratio. Bitrates are
taken from the reference rung unchanged. The ladder is never empty and
never upscales.
"""

import logging
from typing import List

from ..exceptions import PlanningError
from ..models import QualitySpec, SourceVideoInfo
from .dimensions import resolve_dimensions
from .reference import DEFAULT_LADDER, LadderConfig, RungReference

logger = logging.getLogger(__name__)

def _to_spec(rung: RungReference, source: SourceVideoInfo, config: LadderConfig) -> QualitySpec:
    width, height = resolve_dimensions(
        rung.width, rung.height, source.width, source.height,
        config.min_width, config.min_height
    )
    return QualitySpec(
        name=rung.name,
        width=width,
        height=height,
        video_bitrate_kbps=rung.video_bitrate_kbps,
        audio_bitrate_kbps=rung.audio_bitrate_kbps,
    )

def _select_rungs(source: SourceVideoInfo, config: LadderConfig) -> List[RungReference]:
    retained = [rung for rung in config.rungs if rung.height <= source.height]

    if not retained or source.height < config.min_source_height:
        logger.info("Source height %d below ladder, forcing %s",
                    source.height, ", ".join(config.minimum_rungs))
        return [config.rung(name) for name in config.minimum_rungs]

    if len(retained) == 1 and source.height >= config.step_down_min_height:
        selected = list(retained)
        for name, min_height in config.step_down_rungs:
            if source.height >= min_height and all(r.name != name for r in selected):
                selected.append(config.rung(name))
        logger.info("Single rung %s retained, adding %s",
                    retained[0].name, ", ".join(r.name for r in selected[1:]))
        return sorted(selected, key=lambda r: r.height, reverse=True)

    return retained

def plan_ladder(source: SourceVideoInfo, config: LadderConfig = DEFAULT_LADDER) -> List[QualitySpec]:
    """
    Plan the renditions to encode for a source, highest quality first.

    Args:
        source: Probed source properties
        config: Reference ladder to plan from

    Returns:
        List[QualitySpec]: At least one resolved rung

    Raises:
        PlanningError: If the source has no usable dimensions
    """
    if source.width <= 0 or source.height <= 0:
        raise PlanningError(
            f"Source reports invalid dimensions {source.width}x{source.height}",
            module="planner"
        )

    ladder = [_to_spec(rung, source, config) for rung in _select_rungs(source, config)]
    logger.info("Planned %d renditions for %dx%d source: %s",
                len(ladder), source.width, source.height,
                ", ".join(f"{s.name}={s.resolution}" for s in ladder))
    return ladder
