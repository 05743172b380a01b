"""Mini README: Session management for the AnchorSync engine.

Exports the session context and the dispatcher hosts call with perception
batches.
"""

from .dispatcher import FLOOR_CATEGORY, IMAGE_CATEGORY, SessionContext, SessionEventDispatcher

__all__ = ["FLOOR_CATEGORY", "IMAGE_CATEGORY", "SessionContext", "SessionEventDispatcher"]
