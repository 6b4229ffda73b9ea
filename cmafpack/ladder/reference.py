"""Reference ladder configuration"""

from dataclasses import dataclass
from typing import Tuple

from ..config import MIN_HEIGHT, MIN_WIDTH


@dataclass(frozen=True)
class RungReference:
    """Canonical dimensions and bitrates of one ladder rung."""
    name: str
    width: int
    height: int
    video_bitrate_kbps: int
    audio_bitrate_kbps: int


@dataclass(frozen=True)
class LadderConfig:
    """Ordered reference ladder, highest rung first.

    Attributes:
        rungs: Reference rungs retained by source height, highest first
        policy_rungs: Rungs only ever added by the policy rules
        minimum_rungs: Rungs forced when too little of the ladder applies
        min_source_height: Sources shorter than this always get minimum_rungs
        step_down_rungs: (rung, minimum source height) pairs added below a
            lone retained rung
        min_width: Smallest width the resolver produces
        min_height: Smallest height the resolver produces
    """
    rungs: Tuple[RungReference, ...]
    policy_rungs: Tuple[RungReference, ...] = ()
    minimum_rungs: Tuple[str, ...] = ("360p", "240p")
    min_source_height: int = 360
    step_down_rungs: Tuple[Tuple[str, int], ...] = (("480p", 720), ("360p", 480))
    min_width: int = MIN_WIDTH
    min_height: int = MIN_HEIGHT

    def __post_init__(self) -> None:
        if not self.rungs:
            raise ValueError("Ladder must define at least one rung")
        heights = [rung.height for rung in self.rungs]
        if heights != sorted(heights, reverse=True):
            raise ValueError("Ladder rungs must be ordered highest first")
        for name in self.minimum_rungs:
            self.rung(name)
        for name, _ in self.step_down_rungs:
            self.rung(name)

    @property
    def step_down_min_height(self) -> int:
        """Smallest source height for which a lone rung gets company"""
        return min(height for _, height in self.step_down_rungs)

    def rung(self, name: str) -> RungReference:
        """Look up a rung by name"""
        for rung in self.rungs + self.policy_rungs:
            if rung.name == name:
                return rung
        raise ValueError(f"Unknown ladder rung: {name}")


DEFAULT_LADDER = LadderConfig(
    rungs=(
        RungReference("1080p", 1920, 1080, 3500, 128),
        RungReference("720p", 1280, 720, 2500, 128),
        RungReference("480p", 854, 480, 1200, 96),
        RungReference("360p", 640, 360, 800, 96),
        RungReference("240p", 426, 240, 400, 64),
    )
)
