"""Mini README: Tests for the anchor registry's entity lifecycle.

Structure:
    * attach / detach / replace behaviour against the recording renderer.
    * contract violations in strict and production modes.
    * recoverable failures (missing assets, missing metadata).
"""

from __future__ import annotations

import logging
from typing import Optional

import pytest

from anchorsync.configuration import AnchorSyncSettings
from anchorsync.errors import InvariantViolation, MissingMetadataError
from anchorsync.rendering import EntitySpec, NamedAssetEntitySpec, RenderingCollaborator
from anchorsync.tracking import AnchorRegistry, EntitySpecBuilder


class SharedEntityRenderer(RenderingCollaborator):
    """Misbehaving renderer that hands out the same entity every time."""

    renderer_name = "shared"

    def __init__(self) -> None:
        super().__init__()
        self.entity = object()
        self.added = 0

    def create_entity(self, spec: EntitySpec) -> Optional[object]:
        return self.entity

    def add_to_scene(self, entity: object) -> None:
        self.added += 1

    def remove_from_scene(self, entity: object) -> None:
        pass


def test_attach_stores_entity_and_adds_it_to_scene(renderer, settings, make_image) -> None:
    """Attaching should create one entity, show it, and remember it."""

    registry = AnchorRegistry(renderer)
    poster = make_image("img-1")

    entity = registry.attach(poster, EntitySpecBuilder(settings).image_plane)

    assert entity is not None
    assert registry.entity_for(poster) is entity
    assert poster in registry
    assert list(renderer.scene.values()) == [entity]
    assert [call for call, _ in renderer.calls] == ["create", "add"]


def test_attach_twice_raises_in_strict_mode(renderer, settings, make_image) -> None:
    """Re-attaching without detaching first breaks the registry contract."""

    registry = AnchorRegistry(renderer, fail_fast=True)
    factory = EntitySpecBuilder(settings).image_plane
    registry.attach(make_image("img-1"), factory)

    with pytest.raises(InvariantViolation):
        registry.attach(make_image("img-1"), factory)
    assert len(renderer.scene) == 1


def test_attach_twice_logs_in_production_mode(renderer, settings, make_image, caplog) -> None:
    """Production mode should log the violation and leave the first entity alone."""

    registry = AnchorRegistry(renderer, fail_fast=False)
    factory = EntitySpecBuilder(settings).image_plane
    first = registry.attach(make_image("img-1"), factory)

    with caplog.at_level(logging.ERROR):
        second = registry.attach(make_image("img-1"), factory)

    assert second is None
    assert registry.entity_for(make_image("img-1")) is first
    assert "Invariant violation" in caplog.text
    assert len(renderer.created) == 1


def test_detach_is_idempotent(renderer, settings, make_image) -> None:
    """A second detach for the same detection should do nothing."""

    registry = AnchorRegistry(renderer)
    poster = make_image("img-1")
    registry.attach(poster, EntitySpecBuilder(settings).image_plane)

    registry.detach(poster)
    registry.detach(poster)

    assert len(registry) == 0
    assert renderer.scene == {}
    assert [call for call, _ in renderer.calls].count("remove") == 1


def test_detach_of_never_attached_detection_is_silent(renderer, make_image) -> None:
    registry = AnchorRegistry(renderer)

    registry.detach(make_image("ghost"))

    assert renderer.calls == []


def test_replace_swaps_entity_with_fresh_geometry(renderer, settings, make_image) -> None:
    """Replacing removes the old entity before adding the rebuilt one."""

    registry = AnchorRegistry(renderer)
    factory = EntitySpecBuilder(settings).image_plane
    old = registry.attach(make_image("img-1", width=0.3), factory)

    new = registry.replace(make_image("img-1", width=0.6), factory)

    assert new is not old
    assert list(renderer.scene.values()) == [new]
    assert new.spec.width == pytest.approx(0.6)
    assert renderer.calls[-3:] == [
        ("remove", old.entity_id),
        ("create", new.entity_id),
        ("add", new.entity_id),
    ]


def test_replace_with_missing_metadata_keeps_old_entity(renderer, settings, make_image) -> None:
    """A snapshot that cannot be drawn must not remove the current visual."""

    registry = AnchorRegistry(renderer)
    factory = EntitySpecBuilder(settings).image_plane
    old = registry.attach(make_image("img-1"), factory)

    with pytest.raises(MissingMetadataError):
        registry.replace(make_image("img-1", image_name=None), factory)

    assert registry.entity_for(make_image("img-1")) is old
    assert list(renderer.scene.values()) == [old]


def test_unavailable_asset_leaves_detection_unvisualised(renderer, make_plane) -> None:
    """Asset failures are logged and produce no mapping and no scene entry."""

    registry = AnchorRegistry(renderer)
    floor = make_plane("floor-1", 2.0)

    entity = registry.attach(floor, lambda detection: NamedAssetEntitySpec(detection.anchor_id, "missing"))

    assert entity is None
    assert floor not in registry
    assert renderer.scene == {}


def test_shared_entity_is_rejected(settings, make_image) -> None:
    """Two detections may never map to the same entity object."""

    shared_renderer = SharedEntityRenderer()
    registry = AnchorRegistry(shared_renderer)
    factory = EntitySpecBuilder(settings).image_plane
    registry.attach(make_image("img-1"), factory)

    with pytest.raises(InvariantViolation):
        registry.attach(make_image("img-2"), factory)
    assert registry.anchor_ids() == ["img-1"]
    assert shared_renderer.added == 1


def test_clear_removes_every_entity(renderer, make_plane) -> None:
    registry = AnchorRegistry(renderer)
    builder = EntitySpecBuilder(AnchorSyncSettings())
    registry.attach(make_plane("a", 1.0), builder.floor_mesh)
    registry.attach(make_plane("b", 2.0), builder.floor_mesh)

    registry.clear()

    assert len(registry) == 0
    assert renderer.scene == {}
