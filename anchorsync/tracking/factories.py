"""Mini README: Builders turning detections into entity specifications.

Structure:
    * EntitySpecBuilder - settings-aware factories handed to the trackers.

Reference images are covered by a coloured plane of the image's physical
size, rotated to lie flat on the image. The winning floor is drawn either
as its detected mesh or as a named model asset. Each factory raises
``MissingMetadataError`` when the detection lacks what it needs.
"""

from __future__ import annotations

import math

from ..configuration import AnchorSyncSettings, FloorVisualization
from ..detections import ImageDetection, PlanarDetection
from ..errors import MissingMetadataError
from ..rendering import MeshEntitySpec, NamedAssetEntitySpec, PlaneEntitySpec
from .anchor_registry import EntityFactory

# Pitch a quarter turn and yaw a half turn so the plane lies on the image.
IMAGE_PLANE_ROTATION = (math.pi / 2, math.pi, 0.0)


class EntitySpecBuilder:
    """Create entity specs for the tracked detection categories."""

    def __init__(self, settings: AnchorSyncSettings) -> None:
        self.settings = settings

    def image_plane(self, detection: ImageDetection) -> PlaneEntitySpec:
        if not detection.image_name:
            raise MissingMetadataError(detection.anchor_id, "image_name")
        if detection.physical_width <= 0 or detection.physical_height <= 0:
            raise MissingMetadataError(detection.anchor_id, "physical_size")
        return PlaneEntitySpec(
            anchor_id=detection.anchor_id,
            width=detection.physical_width,
            height=detection.physical_height,
            color=self.settings.image_highlight_color,
            rotation=IMAGE_PLANE_ROTATION,
            anchor_target=f"{detection.group_name}/{detection.image_name}",
        )

    def floor_mesh(self, detection: PlanarDetection) -> MeshEntitySpec:
        if detection.geometry is None:
            raise MissingMetadataError(detection.anchor_id, "geometry")
        return MeshEntitySpec(
            anchor_id=detection.anchor_id,
            geometry=detection.geometry,
            color=self.settings.floor_highlight_color,
        )

    def floor_asset(self, detection: PlanarDetection) -> NamedAssetEntitySpec:
        return NamedAssetEntitySpec(
            anchor_id=detection.anchor_id,
            asset_name=self.settings.floor_asset_name,
        )

    def floor_factory(self) -> EntityFactory:
        """Return the floor factory selected by ``floor_visualization``."""

        if self.settings.floor_visualization is FloorVisualization.ASSET:
            return self.floor_asset
        return self.floor_mesh
