"""Mini README: Session-scoped entry point for perception event batches.

Structure:
    * SessionContext - owns the registry and trackers for one AR session.
    * SessionEventDispatcher - routes add/update/remove batches to trackers.

A context is built when a session starts and torn down with ``close`` when
it ends; nothing survives between sessions. Batches are processed in the
order the perception system delivers them. A detection that cannot be
visualised is logged and skipped so the rest of the batch still applies.

Planes can be reclassified between snapshots. Updates move a plane into or
out of the floor candidates accordingly, and a removal reaches the floor
tracker whenever the plane is pooled, whatever its last classification.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from ..configuration import AnchorSyncSettings, get_settings
from ..detections import Detection, DetectionKind
from ..errors import MissingMetadataError, SessionClosedError
from ..logging_utils import get_logger
from ..rendering import REGISTRY, RenderingCollaborator
from ..timing import Clock
from ..tracking import AnchorRegistry, BestOfManyTracker, CategoryTracker, EntitySpecBuilder, SingleSlotTracker

LOGGER = get_logger(__name__)

IMAGE_CATEGORY = "image"
FLOOR_CATEGORY = "floor"


@dataclass(slots=True)
class SessionContext:
    """Mutable state of one perception session."""

    settings: AnchorSyncSettings
    registry: AnchorRegistry
    image_tracker: SingleSlotTracker
    floor_tracker: BestOfManyTracker
    closed: bool = False

    @classmethod
    def create(
        cls,
        renderer: Optional[RenderingCollaborator] = None,
        settings: Optional[AnchorSyncSettings] = None,
        *,
        clock: Clock = time.time,
    ) -> "SessionContext":
        """Build an empty session wired to the given (or configured) renderer."""

        settings = settings or get_settings()
        if renderer is None:
            renderer = REGISTRY.for_settings(settings)
        registry = AnchorRegistry(renderer, fail_fast=settings.fail_fast)
        builder = EntitySpecBuilder(settings)
        context = cls(
            settings=settings,
            registry=registry,
            image_tracker=SingleSlotTracker(IMAGE_CATEGORY, registry, builder.image_plane),
            floor_tracker=BestOfManyTracker(
                FLOOR_CATEGORY,
                registry,
                builder.floor_factory(),
                recompute_interval=settings.recompute_interval_seconds,
                clock=clock,
            ),
        )
        LOGGER.info(
            "Session started with renderer=%s floor_visualization=%s",
            renderer.renderer_name,
            settings.floor_visualization.value,
        )
        return context

    @property
    def trackers(self) -> Dict[str, CategoryTracker]:
        return {IMAGE_CATEGORY: self.image_tracker, FLOOR_CATEGORY: self.floor_tracker}

    def teardown(self) -> None:
        """Hide every entity and drop all tracked state."""

        for tracker in self.trackers.values():
            tracker.teardown()
        self.registry.clear()
        self.closed = True
        LOGGER.info("Session closed")


class SessionEventDispatcher:
    """Route perception batches to the tracker responsible for each detection."""

    def __init__(self, context: SessionContext) -> None:
        self.context = context

    def route(self, detection: Detection) -> Optional[CategoryTracker]:
        """Return the tracker for the detection, or ``None`` when untracked."""

        if detection.kind is DetectionKind.IMAGE:
            return self.context.image_tracker
        if (
            detection.kind is DetectionKind.PLANE
            and detection.classification == self.context.settings.floor_classification
        ):
            return self.context.floor_tracker
        return None

    def on_detections_added(self, batch: Iterable[Detection]) -> None:
        self._process(batch, "added", lambda tracker, detection: tracker.on_added(detection))

    def on_detections_updated(self, batch: Iterable[Detection]) -> None:
        self._process(batch, "updated", lambda tracker, detection: tracker.on_updated(detection))

    def on_detections_removed(self, batch: Iterable[Detection]) -> None:
        self._process(batch, "removed", lambda tracker, detection: tracker.on_removed(detection))

    def close(self) -> None:
        """End the session; later batches raise ``SessionClosedError``."""

        if not self.context.closed:
            self.context.teardown()

    def snapshot(self) -> Dict[str, Any]:
        """Summarise winners and attached entities for host displays."""

        winners = {
            name: tracker.winner.anchor_id if tracker.winner else None
            for name, tracker in self.context.trackers.items()
        }
        return {
            "closed": self.context.closed,
            "winners": winners,
            "floor_candidates": list(self.context.floor_tracker.candidates),
            "attached": self.context.registry.anchor_ids(),
            "renderer": self.context.registry.renderer.metadata(),
        }

    def _process(
        self,
        batch: Iterable[Detection],
        event: str,
        handler: Callable[[CategoryTracker, Detection], None],
    ) -> None:
        if self.context.closed:
            raise SessionClosedError(f"Cannot process '{event}' batch after the session closed")
        floor_tracker = self.context.floor_tracker
        for detection in batch:
            pooled = detection.kind is DetectionKind.PLANE and floor_tracker.tracks(detection.anchor_id)
            tracker = self.route(detection)
            apply = handler
            if event == "removed" and pooled:
                # Removals follow identity: the final snapshot may carry any classification.
                tracker = floor_tracker
            elif event == "updated" and pooled and tracker is None:
                LOGGER.info(
                    "Plane %s reclassified as '%s'; withdrawing from %s candidates",
                    detection.anchor_id,
                    detection.classification,
                    floor_tracker.category,
                )
                tracker, apply = floor_tracker, _withdraw
            elif event == "updated" and tracker is floor_tracker and not pooled:
                LOGGER.info(
                    "Plane %s reclassified as '%s'; joining %s candidates",
                    detection.anchor_id,
                    detection.classification,
                    floor_tracker.category,
                )
                apply = _enlist
            if tracker is None:
                LOGGER.debug("Ignoring %s detection %s", event, detection.describe())
                continue
            try:
                apply(tracker, detection)
            except MissingMetadataError as error:
                LOGGER.warning("Skipping %s detection %s: %s", event, detection.describe(), error)


def _withdraw(tracker: CategoryTracker, detection: Detection) -> None:
    tracker.on_removed(detection)


def _enlist(tracker: CategoryTracker, detection: Detection) -> None:
    tracker.on_added(detection)
