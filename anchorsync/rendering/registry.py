"""Mini README: Name lookup for scene backends.

Structure:
    * RendererRegistry - maps configured renderer names to
      ``RenderingCollaborator`` classes and builds them from settings.
    * REGISTRY - process-wide instance; providers register on import.

Host integrations register their own collaborator (a RealityKit bridge, a
game engine socket, ...) and select it with ``ANCHORSYNC_RENDERER``. Names
are case-insensitive and each one belongs to a single class.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from .base import RenderingCollaborator
from ..configuration import AnchorSyncSettings
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class RendererRegistry:
    """Renderer classes keyed by their lower-cased ``renderer_name``."""

    def __init__(self) -> None:
        self._classes: Dict[str, Type[RenderingCollaborator]] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._classes

    def register(self, renderer_cls: Type[RenderingCollaborator]) -> Type[RenderingCollaborator]:
        """Add a collaborator class; usable as a class decorator."""

        if not (isinstance(renderer_cls, type) and issubclass(renderer_cls, RenderingCollaborator)):
            raise TypeError(f"{renderer_cls!r} is not a RenderingCollaborator subclass")
        name = renderer_cls.renderer_name.lower()
        existing = self._classes.get(name)
        if existing is not None and existing is not renderer_cls:
            raise ValueError(f"Renderer name '{name}' is already used by {existing.__qualname__}")
        self._classes[name] = renderer_cls
        LOGGER.debug("Registered renderer '%s' -> %s", name, renderer_cls.__qualname__)
        return renderer_cls

    def names(self) -> List[str]:
        return sorted(self._classes)

    def resolve(self, name: str) -> Type[RenderingCollaborator]:
        try:
            return self._classes[name.lower()]
        except KeyError:
            known = ", ".join(self.names()) or "none"
            raise KeyError(f"Unknown renderer '{name}' (registered: {known})") from None

    def create(self, name: str, **options: Any) -> RenderingCollaborator:
        renderer_cls = self.resolve(name)
        LOGGER.info("Creating renderer '%s'", name.lower())
        return renderer_cls(**options)

    def for_settings(self, settings: AnchorSyncSettings, name: Optional[str] = None) -> RenderingCollaborator:
        """Build the configured renderer (or ``name``) with the settings' asset directory."""

        return self.create(name or settings.renderer, asset_directory=settings.asset_directory)


REGISTRY = RendererRegistry()
