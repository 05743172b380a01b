"""Mini README: Rendering collaborator subsystem package initialiser.

The package is divided into ``base`` for entity specifications and the
abstract collaborator, ``registry`` for plugin management, and
``providers`` for concrete renderers.
"""

from .base import (
    Entity,
    EntitySpec,
    EntitySpecKind,
    MeshEntitySpec,
    NamedAssetEntitySpec,
    PlaneEntitySpec,
    RenderingCollaborator,
)
from .registry import REGISTRY, RendererRegistry
from . import providers  # noqa: F401  # ensure built-in renderers register on import

__all__ = [
    "Entity",
    "EntitySpec",
    "EntitySpecKind",
    "MeshEntitySpec",
    "NamedAssetEntitySpec",
    "PlaneEntitySpec",
    "REGISTRY",
    "RendererRegistry",
    "RenderingCollaborator",
]
