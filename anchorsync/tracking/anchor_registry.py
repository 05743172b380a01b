"""Mini README: Identity map between tracked detections and scene entities.

Structure:
    * EntityFactory - callable turning a detection into an entity spec.
    * AnchorRegistry - owns entity lifecycle (attach, replace, detach).

The registry is the only component that creates or removes entities. It
keys entries by ``anchor_id`` and guarantees that a detection maps to at
most one entity and that no entity is shared between detections. Every
scene mutation is delegated to the rendering collaborator.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from ..detections import Detection
from ..errors import AssetUnavailableError, InvariantViolation
from ..logging_utils import get_logger
from ..rendering import Entity, EntitySpec, RenderingCollaborator

LOGGER = get_logger(__name__)

EntityFactory = Callable[[Detection], EntitySpec]


class AnchorRegistry:
    """Map tracked detections to the entities that represent them."""

    def __init__(self, renderer: RenderingCollaborator, *, fail_fast: bool = True) -> None:
        self.renderer = renderer
        self.fail_fast = fail_fast
        self._entities: Dict[str, Entity] = {}
        LOGGER.debug(
            "AnchorRegistry initialised with renderer=%s fail_fast=%s",
            renderer.renderer_name,
            fail_fast,
        )

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, detection: Detection) -> bool:
        return detection.anchor_id in self._entities

    def is_attached(self, detection: Detection) -> bool:
        return detection.anchor_id in self._entities

    def entity_for(self, detection: Detection) -> Optional[Entity]:
        """Return the entity representing the detection, if any."""

        return self._entities.get(detection.anchor_id)

    def anchor_ids(self) -> List[str]:
        """Identifiers of every attached detection in attachment order."""

        return list(self._entities)

    def attach(self, detection: Detection, entity_factory: EntityFactory) -> Optional[Entity]:
        """Create, store and show an entity for a detection that has none.

        ``MissingMetadataError`` from the factory propagates before anything
        changes. Asset failures are logged and leave the detection without an
        entity.
        """

        if detection.anchor_id in self._entities:
            self._violation(f"Detection {detection.describe()} is already attached; detach it first")
            return None
        spec = entity_factory(detection)
        return self._issue(detection, spec)

    def detach(self, detection: Detection) -> None:
        """Remove the detection's entity from the scene. No-op when unattached."""

        entity = self._entities.pop(detection.anchor_id, None)
        if entity is None:
            LOGGER.debug("Detach ignored for unattached detection %s", detection.describe())
            return
        self.renderer.remove_from_scene(entity)
        LOGGER.debug("Detached entity for %s", detection.describe())

    def replace(self, detection: Detection, entity_factory: EntityFactory) -> Optional[Entity]:
        """Rebuild the detection's entity from its latest geometry."""

        spec = entity_factory(detection)
        self.detach(detection)
        return self._issue(detection, spec)

    def clear(self) -> None:
        """Remove every entity from the scene."""

        for anchor_id in list(self._entities):
            self.renderer.remove_from_scene(self._entities.pop(anchor_id))
        LOGGER.debug("AnchorRegistry cleared")

    def _issue(self, detection: Detection, spec: EntitySpec) -> Optional[Entity]:
        try:
            entity = self.renderer.create_entity(spec)
        except AssetUnavailableError as error:
            LOGGER.warning("Skipping entity for %s: %s", detection.describe(), error)
            return None
        if entity is None:
            LOGGER.warning(
                "Renderer produced no %s entity for %s", spec.kind.value, detection.describe()
            )
            return None
        if any(existing is entity for existing in self._entities.values()):
            self._violation("Renderer returned an entity already owned by another detection")
            return None
        self.renderer.add_to_scene(entity)
        self._entities[detection.anchor_id] = entity
        LOGGER.debug("Attached %s entity for %s", spec.kind.value, detection.describe())
        return entity

    def _violation(self, message: str) -> None:
        if self.fail_fast:
            raise InvariantViolation(message)
        LOGGER.error("Invariant violation ignored in production mode: %s", message)
