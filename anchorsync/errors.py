"""Mini README: Error taxonomy shared by the AnchorSync engine.

Structure:
    * AnchorSyncError - base class for every engine error.
    * AssetUnavailableError - a visual asset could not be loaded.
    * InvariantViolation - a caller broke the anchor registry contract.
    * MissingMetadataError - a detection lacks a field needed to draw it.
    * SessionClosedError - events arrived after the session was torn down.

Asset and metadata errors are recoverable: the registry and dispatcher log
them and move on to the next event. Invariant violations are programming
errors and are raised unless the engine runs in production mode.
"""

from __future__ import annotations


class AnchorSyncError(Exception):
    """Base class for errors raised by the engine."""


class AssetUnavailableError(AnchorSyncError):
    """Raised by a rendering collaborator when a named asset cannot be loaded."""

    def __init__(self, asset_name: str, reason: str = "not found") -> None:
        super().__init__(f"Asset '{asset_name}' is unavailable: {reason}")
        self.asset_name = asset_name
        self.reason = reason


class InvariantViolation(AnchorSyncError):
    """Raised when the one-entity-per-detection contract would be broken."""


class MissingMetadataError(AnchorSyncError):
    """Raised when a detection cannot be visualised because a field is missing."""

    def __init__(self, anchor_id: str, field_name: str) -> None:
        super().__init__(f"Detection {anchor_id} is missing '{field_name}'")
        self.anchor_id = anchor_id
        self.field_name = field_name


class SessionClosedError(AnchorSyncError):
    """Raised when a closed session receives perception events."""
