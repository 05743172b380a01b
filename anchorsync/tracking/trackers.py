"""Mini README: Category trackers selecting which detection gets visualised.

Structure:
    * CategoryTracker - shared interface driven by the session dispatcher.
    * SingleSlotTracker - first detected wins; used for reference images.
    * BestOfManyTracker - largest candidate wins; used for floor planes.

Trackers own the selection policy and nothing else. Every entity they want
shown or hidden goes through the ``AnchorRegistry``. The best-of-many
tracker reacts immediately to a clearly larger new candidate or to losing
its winner, and throttles the sweeps triggered by the stream of geometry
refinements with a ``RateLimiter``.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from ..detections import Detection, PlanarDetection
from ..logging_utils import get_logger
from ..timing import Clock, RateLimiter
from .anchor_registry import AnchorRegistry, EntityFactory

LOGGER = get_logger(__name__)


class CategoryTracker(ABC):
    """Selection policy for one tracked category."""

    def __init__(self, category: str, registry: AnchorRegistry, entity_factory: EntityFactory) -> None:
        self.category = category
        self.registry = registry
        self.entity_factory = entity_factory
        self._winner: Optional[Detection] = None

    @property
    def winner(self) -> Optional[Detection]:
        """Detection currently selected for visualisation."""

        return self._winner

    def is_winner(self, detection: Detection) -> bool:
        return self._winner is not None and self._winner.anchor_id == detection.anchor_id

    @abstractmethod
    def on_added(self, detection: Detection) -> None:
        """Handle a newly reported detection of this category."""

    @abstractmethod
    def on_updated(self, detection: Detection) -> None:
        """Handle a refreshed snapshot of a detection of this category."""

    @abstractmethod
    def on_removed(self, detection: Detection) -> None:
        """Handle a detection the perception system no longer reports."""

    def teardown(self) -> None:
        """Hide the winner and forget all state."""

        if self._winner is not None:
            self.registry.detach(self._winner)
        self._winner = None


class SingleSlotTracker(CategoryTracker):
    """Track the first detection of the category until it disappears."""

    def on_added(self, detection: Detection) -> None:
        if self._winner is not None:
            LOGGER.debug(
                "%s slot held by %s; ignoring %s",
                self.category,
                self._winner.anchor_id,
                detection.anchor_id,
            )
            return
        self.registry.attach(detection, self.entity_factory)
        self._winner = detection
        LOGGER.info("%s tracking %s", self.category, detection.describe())

    def on_updated(self, detection: Detection) -> None:
        if not self.is_winner(detection):
            LOGGER.debug("%s ignoring update for non-winner %s", self.category, detection.anchor_id)
            return
        self._winner = detection
        self.registry.replace(detection, self.entity_factory)

    def on_removed(self, detection: Detection) -> None:
        if not self.is_winner(detection):
            LOGGER.debug("%s ignoring removal of non-winner %s", self.category, detection.anchor_id)
            return
        self.registry.detach(detection)
        self._winner = None
        LOGGER.info("%s slot released by %s", self.category, detection.describe())


class BestOfManyTracker(CategoryTracker):
    """Keep every live candidate and visualise the one with the largest area."""

    def __init__(
        self,
        category: str,
        registry: AnchorRegistry,
        entity_factory: EntityFactory,
        *,
        recompute_interval: float = 0.5,
        clock: Clock = time.time,
    ) -> None:
        super().__init__(category, registry, entity_factory)
        self._pool: Dict[str, PlanarDetection] = {}
        self._rate_limiter = RateLimiter(recompute_interval, self.recompute, clock=clock)

    @property
    def candidates(self) -> Mapping[str, PlanarDetection]:
        """Read-only view of the candidate pool keyed by anchor id."""

        return MappingProxyType(self._pool)

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    def tracks(self, anchor_id: str) -> bool:
        return anchor_id in self._pool

    def on_added(self, detection: PlanarDetection) -> None:
        if detection.anchor_id in self._pool:
            LOGGER.debug("%s candidate %s re-added; refreshing", self.category, detection.anchor_id)
        self._store(detection)
        if self._winner is None or detection.area > self._winner.area:
            self._rate_limiter.force()

    def on_updated(self, detection: PlanarDetection) -> None:
        if detection.anchor_id not in self._pool:
            LOGGER.debug("%s ignoring update for unknown candidate %s", self.category, detection.anchor_id)
            return
        self._store(detection)
        self._rate_limiter.attempt()

    def on_removed(self, detection: PlanarDetection) -> None:
        if self._pool.pop(detection.anchor_id, None) is None:
            LOGGER.debug("%s ignoring removal of unknown candidate %s", self.category, detection.anchor_id)
            return
        if self.is_winner(detection):
            self._rate_limiter.force()

    def recompute(self) -> None:
        """Select the largest candidate and move the entity to it if it changed."""

        best: Optional[PlanarDetection] = None
        for candidate in self._pool.values():
            if best is None or candidate.area > best.area:
                best = candidate

        previous = self._winner
        if best is not None and previous is not None and best.anchor_id == previous.anchor_id:
            self._winner = best
            if not self.registry.is_attached(best):
                # An earlier snapshot could not be drawn; try again with this one.
                LOGGER.info("%s winner %s has no entity yet, retrying", self.category, best.anchor_id)
                self.registry.attach(best, self.entity_factory)
            return
        if best is None and previous is None:
            return

        self._winner = best
        if previous is not None:
            self.registry.detach(previous)
        if best is not None:
            LOGGER.info(
                "%s winner %s -> %s (area %.3f)",
                self.category,
                previous.anchor_id if previous else None,
                best.anchor_id,
                best.area,
            )
            self.registry.attach(best, self.entity_factory)
        else:
            LOGGER.info("%s lost its last candidate %s", self.category, previous.anchor_id)

    def teardown(self) -> None:
        super().teardown()
        self._pool.clear()

    def _store(self, detection: PlanarDetection) -> None:
        self._pool[detection.anchor_id] = detection
        if self.is_winner(detection):
            self._winner = detection
