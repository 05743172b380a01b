"""Mini README: Entity specifications and the rendering collaborator contract.

Structure:
    * EntitySpecKind - tag identifying the entity specification variant.
    * PlaneEntitySpec - flat coloured plane with an orientation.
    * MeshEntitySpec - mesh built from detected geometry buffers.
    * NamedAssetEntitySpec - model asset loaded by name.
    * RenderingCollaborator - abstract interface implemented by renderers.

The engine only ever talks to a renderer through ``RenderingCollaborator``.
Entities returned by ``create_entity`` are opaque to the engine; it stores
them, hands them back for removal, and never inspects them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from ..detections import PlaneGeometry
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Entity = Any


class EntitySpecKind(str, Enum):
    """Variants of entity specifications a renderer must understand."""

    PLANE = "plane"
    MESH = "mesh"
    ASSET = "asset"


@dataclass(slots=True, frozen=True)
class PlaneEntitySpec:
    """A flat plane of the given size and colour anchored to a detection."""

    kind: ClassVar[EntitySpecKind] = EntitySpecKind.PLANE

    anchor_id: str
    width: float
    height: float
    color: str
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    anchor_target: Optional[str] = None


@dataclass(slots=True, frozen=True, eq=False)
class MeshEntitySpec:
    """A mesh generated from a detected plane's geometry buffers."""

    kind: ClassVar[EntitySpecKind] = EntitySpecKind.MESH

    anchor_id: str
    geometry: PlaneGeometry
    color: str


@dataclass(slots=True, frozen=True)
class NamedAssetEntitySpec:
    """A model asset looked up by name and placed on a detection."""

    kind: ClassVar[EntitySpecKind] = EntitySpecKind.ASSET

    anchor_id: str
    asset_name: str


EntitySpec = Union[PlaneEntitySpec, MeshEntitySpec, NamedAssetEntitySpec]


class RenderingCollaborator(ABC):
    """Base interface for scene backends that draw engine entities."""

    renderer_name: str = "generic"

    def __init__(self, **options: Any) -> None:
        self.options = options
        LOGGER.debug("Initialising %s renderer with options %s", self.renderer_name, options)

    @abstractmethod
    def create_entity(self, spec: EntitySpec) -> Optional[Entity]:
        """Build an entity for the spec.

        Returns ``None`` or raises ``AssetUnavailableError`` when the visual
        cannot be produced.
        """

    @abstractmethod
    def add_to_scene(self, entity: Entity) -> None:
        """Insert a previously created entity into the scene."""

    @abstractmethod
    def remove_from_scene(self, entity: Entity) -> None:
        """Remove an entity from the scene and release it."""

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for host displays."""

        return {"renderer": self.renderer_name}
