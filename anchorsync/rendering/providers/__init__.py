"""Mini README: Concrete rendering collaborator implementations.

New renderers should subclass ``RenderingCollaborator`` and register with
``REGISTRY`` during module import to become selectable by name.
"""

from .recording import RecordingRenderer, SceneEntity

__all__ = ["RecordingRenderer", "SceneEntity"]
