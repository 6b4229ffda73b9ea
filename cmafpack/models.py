"""Value types shared across the packaging pipeline

All types are frozen dataclasses: a stage derives new values from the
previous stage's output rather than mutating it.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class SourceVideoInfo:
    """Probed properties of the uploaded source.

    Attributes:
        duration: Duration in seconds
        width: Display width in pixels
        height: Display height in pixels
        has_audio: Whether the source carries an audio stream
    """
    duration: float
    width: int
    height: int
    has_audio: bool = True

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class QualitySpec:
    """One planned rung of the ladder with resolved dimensions."""
    name: str
    width: int
    height: int
    video_bitrate_kbps: int
    audio_bitrate_kbps: int

    @property
    def bandwidth(self) -> int:
        """Combined video and audio bitrate in bits per second"""
        return (self.video_bitrate_kbps + self.audio_bitrate_kbps) * 1000

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


class TimingStrategy(Enum):
    """How a rendition's segment durations were obtained"""
    AUTHORITATIVE = "authoritative"
    SYNTHESIZED = "synthesized"


@dataclass(frozen=True)
class EncodeRequest:
    """Everything the encoder needs to produce one rendition"""
    source: Path
    spec: QualitySpec
    output_dir: Path
    segment_duration: float
    include_audio: bool = True


@dataclass(frozen=True)
class EncodeOutcome:
    """What the encoder reports back for one rendition.

    ``error`` is None on success. ``reported_playlist`` points at the
    encoder's own playlist when it wrote one.
    """
    output_dir: Path
    reported_playlist: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RenditionResult:
    """Outcome of one rung after encoding and timing extraction"""
    spec: QualitySpec
    output_dir: Path
    succeeded: bool
    segment_durations: Tuple[float, ...] = ()
    timing_strategy: Optional[TimingStrategy] = None
    reported_playlist: Optional[Path] = None
    error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def segment_count(self) -> int:
        return len(self.segment_durations)

    @property
    def total_duration(self) -> float:
        return sum(self.segment_durations)


@dataclass(frozen=True)
class ManifestSet:
    """Rendered manifests of one job.

    ``media_playlists`` pairs each rendition name with the text of its
    media playlist, in ladder order.
    """
    hls_master: str
    dash_mpd: str
    media_playlists: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
