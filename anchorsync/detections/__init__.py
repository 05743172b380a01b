"""Mini README: Detection data model package.

Re-exports the tagged detection variants consumed by the trackers and the
host surfaces. See ``models`` for the identity rules.
"""

from .models import (
    Detection,
    DetectionKind,
    ImageDetection,
    OtherDetection,
    PlanarDetection,
    PlaneExtent,
    PlaneGeometry,
)

__all__ = [
    "Detection",
    "DetectionKind",
    "ImageDetection",
    "OtherDetection",
    "PlanarDetection",
    "PlaneExtent",
    "PlaneGeometry",
]
