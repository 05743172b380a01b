"""Mini README: Detection records delivered by the perception system.

Structure:
    * DetectionKind - explicit tag used to route detections.
    * PlaneExtent - estimated planar size used for area comparison.
    * PlaneGeometry - vertex, index and texture coordinate buffers.
    * Detection - base record keyed by the host supplied ``anchor_id``.
    * ImageDetection / PlanarDetection / OtherDetection - the tagged variants.

Detections are snapshots: every update from the perception system arrives
as a fresh object carrying the same ``anchor_id``. The dataclasses are
declared with ``eq=False`` so that nothing in the engine compares payloads
by value; identity always goes through ``anchor_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional

import numpy as np


class DetectionKind(str, Enum):
    """Kinds of detections the perception system reports."""

    IMAGE = "image"
    PLANE = "plane"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class PlaneExtent:
    """Width and height (metres) of a detected plane's estimated extent."""

    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(slots=True, eq=False)
class PlaneGeometry:
    """Triangle mesh approximating a detected plane."""

    vertices: np.ndarray
    triangle_indices: np.ndarray
    texture_coordinates: np.ndarray

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float32)
        self.triangle_indices = np.asarray(self.triangle_indices, dtype=np.int32).reshape(-1)
        self.texture_coordinates = np.asarray(self.texture_coordinates, dtype=np.float32)
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise ValueError("Plane vertices must be of shape (N, 3)")
        if self.triangle_indices.size % 3 != 0:
            raise ValueError("Triangle indices must come in groups of three")
        if self.triangle_indices.size and (
            self.triangle_indices.min() < 0 or self.triangle_indices.max() >= len(self.vertices)
        ):
            raise ValueError("Triangle indices reference vertices that do not exist")
        if self.texture_coordinates.shape != (len(self.vertices), 2):
            raise ValueError("Texture coordinates must be of shape (N, 2)")

    @property
    def triangle_count(self) -> int:
        return int(self.triangle_indices.size // 3)


@dataclass(slots=True, eq=False)
class Detection:
    """Base record for anything the perception system recognised."""

    kind: ClassVar[DetectionKind] = DetectionKind.OTHER

    anchor_id: str

    def describe(self) -> str:
        """Short label used in log messages."""

        return f"{self.kind.value}:{self.anchor_id}"


@dataclass(slots=True, eq=False)
class ImageDetection(Detection):
    """A recognised reference image with its physical size."""

    kind: ClassVar[DetectionKind] = DetectionKind.IMAGE

    image_name: Optional[str] = None
    physical_width: float = 0.0
    physical_height: float = 0.0
    group_name: str = "Posters"


@dataclass(slots=True, eq=False)
class PlanarDetection(Detection):
    """A detected plane with its classification, extent and mesh."""

    kind: ClassVar[DetectionKind] = DetectionKind.PLANE

    classification: str = "none"
    extent: PlaneExtent = PlaneExtent(0.0, 0.0)
    geometry: Optional[PlaneGeometry] = None

    @property
    def area(self) -> float:
        return self.extent.area


@dataclass(slots=True, eq=False)
class OtherDetection(Detection):
    """Any detection the engine does not track (faces, bodies, objects...)."""

    kind: ClassVar[DetectionKind] = DetectionKind.OTHER
