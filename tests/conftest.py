"""Mini README: Shared fixtures for the AnchorSync test-suite.

Structure:
    * FakeClock / clock - manually advanced time source for rate limiting.
    * renderer - fresh in-memory recording renderer.
    * settings - settings with a 0.5s recomputation interval.
    * make_plane / make_image - detection builders.
    * session - dispatcher wired to the fixtures above.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import pytest

from anchorsync.configuration import AnchorSyncSettings
from anchorsync.detections import ImageDetection, PlanarDetection, PlaneExtent, PlaneGeometry
from anchorsync.rendering.providers import RecordingRenderer
from anchorsync.session import SessionContext, SessionEventDispatcher


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def square_geometry(size: float = 1.0) -> PlaneGeometry:
    half = size / 2
    return PlaneGeometry(
        vertices=np.array(
            [[-half, 0.0, -half], [half, 0.0, -half], [half, 0.0, half], [-half, 0.0, half]]
        ),
        triangle_indices=np.array([0, 1, 2, 0, 2, 3]),
        texture_coordinates=np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def settings() -> AnchorSyncSettings:
    return AnchorSyncSettings(environment="development", recompute_interval_seconds=0.5)


@pytest.fixture
def make_plane() -> Callable[..., PlanarDetection]:
    def _make(
        anchor_id: str,
        width: float,
        height: float = 1.0,
        *,
        classification: str = "floor",
        with_geometry: bool = True,
    ) -> PlanarDetection:
        return PlanarDetection(
            anchor_id=anchor_id,
            classification=classification,
            extent=PlaneExtent(width, height),
            geometry=square_geometry(width) if with_geometry else None,
        )

    return _make


@pytest.fixture
def make_image() -> Callable[..., ImageDetection]:
    def _make(
        anchor_id: str,
        image_name: Optional[str] = "poster",
        width: float = 0.3,
        height: float = 0.4,
    ) -> ImageDetection:
        return ImageDetection(
            anchor_id=anchor_id,
            image_name=image_name,
            physical_width=width,
            physical_height=height,
        )

    return _make


@pytest.fixture
def session(
    renderer: RecordingRenderer, settings: AnchorSyncSettings, clock: FakeClock
) -> SessionEventDispatcher:
    return SessionEventDispatcher(SessionContext.create(renderer, settings, clock=clock))
