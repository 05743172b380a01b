"""Mini README: In-memory renderer that records every scene mutation.

Structure:
    * SceneEntity - entity handed back to the engine.
    * RecordingRenderer - collaborator keeping a dictionary scene and a call log.

The renderer stands in for a real scene graph in tests, in the replay
command and behind the HTTP perception bridge. Named assets resolve against
an asset directory by file stem and are cached after their first lookup, so
each model is "loaded" once per renderer.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..base import EntitySpec, EntitySpecKind, RenderingCollaborator
from ..registry import REGISTRY
from ...errors import AssetUnavailableError
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True, eq=False)
class SceneEntity:
    """Entity created by the recording renderer."""

    entity_id: int
    spec: EntitySpec
    asset_path: Optional[Path] = None

    def as_dict(self) -> Dict[str, Any]:
        """Export the entity with serialisable values."""

        payload: Dict[str, Any] = {
            "entity_id": self.entity_id,
            "anchor_id": self.spec.anchor_id,
            "kind": self.spec.kind.value,
        }
        if self.spec.kind is EntitySpecKind.PLANE:
            payload.update(
                width=self.spec.width,
                height=self.spec.height,
                color=self.spec.color,
                rotation=list(self.spec.rotation),
            )
        elif self.spec.kind is EntitySpecKind.MESH:
            payload.update(
                color=self.spec.color,
                vertex_count=int(len(self.spec.geometry.vertices)),
                triangle_count=self.spec.geometry.triangle_count,
            )
        else:
            payload.update(
                asset_name=self.spec.asset_name,
                asset_path=str(self.asset_path) if self.asset_path else None,
            )
        return payload


@REGISTRY.register
class RecordingRenderer(RenderingCollaborator):
    """Renderer keeping the scene in a dictionary and logging each call."""

    renderer_name = "recording"

    def __init__(self, *, asset_directory: Optional[Path] = None, **options: Any) -> None:
        super().__init__(asset_directory=asset_directory, **options)
        self.asset_directory = Path(asset_directory) if asset_directory else None
        self.scene: Dict[int, SceneEntity] = {}
        self.calls: List[Tuple[str, int]] = []
        self.created: List[SceneEntity] = []
        self._asset_cache: Dict[str, Path] = {}
        self._ids = itertools.count(1)

    def create_entity(self, spec: EntitySpec) -> SceneEntity:
        asset_path = None
        if spec.kind is EntitySpecKind.ASSET:
            asset_path = self._load_asset(spec.asset_name)
        entity = SceneEntity(entity_id=next(self._ids), spec=spec, asset_path=asset_path)
        self.created.append(entity)
        self.calls.append(("create", entity.entity_id))
        LOGGER.debug("Created %s entity %s for %s", spec.kind.value, entity.entity_id, spec.anchor_id)
        return entity

    def add_to_scene(self, entity: SceneEntity) -> None:
        self.scene[entity.entity_id] = entity
        self.calls.append(("add", entity.entity_id))

    def remove_from_scene(self, entity: SceneEntity) -> None:
        if self.scene.pop(entity.entity_id, None) is None:
            LOGGER.warning("Entity %s was not in the scene", entity.entity_id)
        self.calls.append(("remove", entity.entity_id))

    def entities_for(self, anchor_id: str) -> List[SceneEntity]:
        """Return scene entities anchored to the given detection."""

        return [entity for entity in self.scene.values() if entity.spec.anchor_id == anchor_id]

    def snapshot(self) -> List[Dict[str, Any]]:
        """Export the current scene ordered by entity id."""

        return [self.scene[entity_id].as_dict() for entity_id in sorted(self.scene)]

    def metadata(self) -> Dict[str, str]:
        return {
            "renderer": self.renderer_name,
            "asset_directory": str(self.asset_directory) if self.asset_directory else "not configured",
            "entities": str(len(self.scene)),
        }

    def _load_asset(self, asset_name: str) -> Path:
        """Resolve a named asset to a file, caching successful lookups."""

        if asset_name in self._asset_cache:
            return self._asset_cache[asset_name]
        if self.asset_directory is None:
            raise AssetUnavailableError(asset_name, "no asset directory configured")
        if not self.asset_directory.is_dir():
            raise AssetUnavailableError(asset_name, f"{self.asset_directory} does not exist")
        matches = sorted(path for path in self.asset_directory.iterdir() if path.stem == asset_name)
        if not matches:
            raise AssetUnavailableError(asset_name, f"no file named '{asset_name}' in {self.asset_directory}")
        LOGGER.info("Loaded asset '%s' from %s", asset_name, matches[0])
        self._asset_cache[asset_name] = matches[0]
        return matches[0]
