"""Mini README: Tracking subsystem package initialiser.

``anchor_registry`` owns entities, ``trackers`` decides which detection
each category shows, and ``factories`` builds the entity specs.
"""

from .anchor_registry import AnchorRegistry, EntityFactory
from .factories import EntitySpecBuilder
from .trackers import BestOfManyTracker, CategoryTracker, SingleSlotTracker

__all__ = [
    "AnchorRegistry",
    "BestOfManyTracker",
    "CategoryTracker",
    "EntityFactory",
    "EntitySpecBuilder",
    "SingleSlotTracker",
]
