"""Quality ladder planning

This package provides:
- The immutable reference ladder configuration
- Aspect-ratio preserving, codec-legal dimension resolution
- The planner that selects and resolves rungs for a source
"""

from .reference import RungReference, LadderConfig, DEFAULT_LADDER
from .dimensions import resolve_dimensions
from .planner import plan_ladder

__all__ = [
    'RungReference',
    'LadderConfig',
    'DEFAULT_LADDER',
    'resolve_dimensions',
    'plan_ladder',
]
