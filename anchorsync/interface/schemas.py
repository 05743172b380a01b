"""Mini README: Wire payloads accepted by the host-facing interfaces.

Structure:
    * BatchEvent - the three perception callbacks a batch can belong to.
    * DetectionPayload - JSON description of one detection snapshot.
    * ScriptedBatchPayload - one timed batch inside a replay script.
    * deliver - hand converted detections to the matching dispatcher entry point.

Payloads are validated with Pydantic and converted into the engine's
detection dataclasses. Geometry buffers become numpy arrays on conversion,
so shape errors surface as ``ValueError``.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..detections import (
    Detection,
    DetectionKind,
    ImageDetection,
    OtherDetection,
    PlanarDetection,
    PlaneExtent,
    PlaneGeometry,
)
from ..session import SessionEventDispatcher


class BatchEvent(str, Enum):
    """Perception callbacks a batch is delivered through."""

    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


class ExtentPayload(BaseModel):
    width: float = Field(0.0, ge=0.0)
    height: float = Field(0.0, ge=0.0)


class GeometryPayload(BaseModel):
    vertices: List[Tuple[float, float, float]]
    triangle_indices: List[int]
    texture_coordinates: List[Tuple[float, float]]

    def to_geometry(self) -> PlaneGeometry:
        return PlaneGeometry(
            vertices=self.vertices,
            triangle_indices=self.triangle_indices,
            texture_coordinates=self.texture_coordinates,
        )


class DetectionPayload(BaseModel):
    """One detection snapshot as sent by a perception bridge."""

    kind: DetectionKind
    anchor_id: str = Field(..., min_length=1)
    image_name: Optional[str] = None
    physical_width: float = Field(0.0, ge=0.0)
    physical_height: float = Field(0.0, ge=0.0)
    group_name: str = "Posters"
    classification: str = "none"
    extent: ExtentPayload = Field(default_factory=ExtentPayload)
    geometry: Optional[GeometryPayload] = None

    def to_detection(self) -> Detection:
        if self.kind is DetectionKind.IMAGE:
            return ImageDetection(
                anchor_id=self.anchor_id,
                image_name=self.image_name,
                physical_width=self.physical_width,
                physical_height=self.physical_height,
                group_name=self.group_name,
            )
        if self.kind is DetectionKind.PLANE:
            return PlanarDetection(
                anchor_id=self.anchor_id,
                classification=self.classification,
                extent=PlaneExtent(self.extent.width, self.extent.height),
                geometry=self.geometry.to_geometry() if self.geometry else None,
            )
        return OtherDetection(anchor_id=self.anchor_id)


class ScriptedBatchPayload(BaseModel):
    """A batch in a replay script, delivered at ``at`` seconds into the session."""

    at: float = Field(0.0, ge=0.0)
    event: BatchEvent
    detections: List[DetectionPayload] = Field(default_factory=list)


def deliver(dispatcher: SessionEventDispatcher, event: BatchEvent, detections: Sequence[Detection]) -> None:
    """Invoke the dispatcher entry point matching ``event``."""

    if event is BatchEvent.ADDED:
        dispatcher.on_detections_added(detections)
    elif event is BatchEvent.UPDATED:
        dispatcher.on_detections_updated(detections)
    else:
        dispatcher.on_detections_removed(detections)
