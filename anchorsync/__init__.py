"""Mini README: Core package initializer for the AnchorSync engine.

AnchorSync keeps a small set of visual placeholders in sync with the
detections reported by an AR perception system. This initializer only
exposes the logging factory so importing the package stays cheap; the
engine itself lives in ``anchorsync.session`` and its collaborators.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
