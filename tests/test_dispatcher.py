"""Mini README: Tests for the session dispatcher and session lifecycle.

Structure:
    * routing by detection kind and plane classification.
    * batch resilience when a single detection cannot be drawn.
    * the end-to-end floor scenario with rate limited refinements.
    * registry consistency over a long pseudo-random event stream.
    * session teardown.
"""

from __future__ import annotations

import random

import pytest

from anchorsync.configuration import AnchorSyncSettings
from anchorsync.detections import OtherDetection
from anchorsync.errors import SessionClosedError
from anchorsync.rendering.providers import RecordingRenderer
from anchorsync.session import SessionContext, SessionEventDispatcher


def test_dispatcher_routes_images_and_floors(session, renderer, make_image, make_plane) -> None:
    """Images and floor planes reach their trackers; everything else is ignored."""

    session.on_detections_added(
        [
            make_image("poster"),
            make_plane("floor", 3.0),
            make_plane("wall", 50.0, classification="wall"),
            OtherDetection(anchor_id="face"),
        ]
    )

    snapshot = session.snapshot()
    assert snapshot["winners"] == {"image": "poster", "floor": "floor"}
    assert snapshot["floor_candidates"] == ["floor"]
    assert sorted(entity.spec.anchor_id for entity in renderer.scene.values()) == ["floor", "poster"]


def test_batch_continues_after_missing_metadata(session, renderer, make_image, make_plane, caplog) -> None:
    """A detection that cannot be drawn is skipped without aborting the batch."""

    session.on_detections_added(
        [
            make_image("nameless", image_name=None),
            make_plane("meshless", 8.0, with_geometry=False),
            make_image("poster"),
            make_plane("floor", 2.0),
        ]
    )

    context = session.context
    assert context.image_tracker.winner.anchor_id == "poster"
    assert context.floor_tracker.winner.anchor_id == "meshless"
    assert context.registry.anchor_ids() == ["poster"]
    assert "Skipping added detection" in caplog.text


def test_end_to_end_floor_scenario(session, renderer, clock, make_plane) -> None:
    """P2 wins on arrival; P1's later growth is applied once the interval passed."""

    session.on_detections_added([make_plane("P1", 4.0), make_plane("P2", 9.0)])

    p2_creates = [entity for entity in renderer.created if entity.spec.anchor_id == "P2"]
    assert len(p2_creates) == 1
    p2_entity = p2_creates[0]
    assert session.context.floor_tracker.winner.anchor_id == "P2"
    calls_before_updates = list(renderer.calls)

    clock.advance(0.1)
    session.on_detections_updated([make_plane("P1", 20.0)])
    assert renderer.calls == calls_before_updates
    assert session.context.floor_tracker.winner.anchor_id == "P2"

    clock.advance(1.0)
    session.on_detections_updated([make_plane("P1", 20.0)])

    new_calls = renderer.calls[len(calls_before_updates):]
    assert [call for call, _ in new_calls] == ["remove", "create", "add"]
    assert new_calls[0] == ("remove", p2_entity.entity_id)
    assert renderer.created[-1].spec.anchor_id == "P1"
    assert session.context.floor_tracker.winner.anchor_id == "P1"
    assert [entity.spec.anchor_id for entity in renderer.scene.values()] == ["P1"]


def test_reclassified_floor_is_withdrawn(session, renderer, make_plane) -> None:
    """A floor candidate updated as a wall leaves the pool immediately."""

    session.on_detections_added([make_plane("A", 9.0), make_plane("B", 4.0)])

    session.on_detections_updated([make_plane("A", 9.0, classification="wall")])

    tracker = session.context.floor_tracker
    assert not tracker.tracks("A")
    assert tracker.winner.anchor_id == "B"
    assert [entity.spec.anchor_id for entity in renderer.scene.values()] == ["B"]


def test_removal_of_pooled_plane_ignores_final_classification(session, renderer, make_plane) -> None:
    """A floor winner removed with a snapshot saying "wall" still leaves the scene."""

    session.on_detections_added([make_plane("W", 9.0)])

    session.on_detections_removed([make_plane("W", 9.0, classification="wall")])

    tracker = session.context.floor_tracker
    assert renderer.scene == {}
    assert not tracker.tracks("W")
    assert tracker.winner is None
    assert session.context.registry.anchor_ids() == []


def test_plane_refined_to_floor_joins_candidates(session, renderer, make_plane) -> None:
    """A plane first seen unclassified enters the pool once an update calls it a floor."""

    session.on_detections_added([make_plane("P", 4.0, classification="none")])
    assert renderer.scene == {}

    session.on_detections_updated([make_plane("P", 4.0)])

    tracker = session.context.floor_tracker
    assert tracker.tracks("P")
    assert tracker.winner.anchor_id == "P"
    assert [entity.spec.anchor_id for entity in renderer.scene.values()] == ["P"]


def test_meshless_floor_winner_is_drawn_once_geometry_arrives(
    session, renderer, clock, make_plane
) -> None:
    """A winner skipped for missing geometry gets its entity from a later snapshot."""

    session.on_detections_added([make_plane("F", 4.0, with_geometry=False)])
    assert session.context.floor_tracker.winner.anchor_id == "F"
    assert renderer.scene == {}

    clock.advance(2.0)
    session.on_detections_updated([make_plane("F", 4.0)])

    assert session.context.registry.anchor_ids() == ["F"]
    assert [entity.spec.anchor_id for entity in renderer.scene.values()] == ["F"]

    clock.advance(2.0)
    session.on_detections_updated([make_plane("F", 4.5)])

    assert len([entity for entity in renderer.created if entity.spec.anchor_id == "F"]) == 1


def test_untracked_removals_are_ignored(session, renderer, make_plane) -> None:
    session.on_detections_removed([make_plane("wall", 1.0, classification="wall"), OtherDetection("x")])

    assert renderer.calls == []


def test_registry_stays_consistent_under_random_events(
    session, renderer, clock, make_image, make_plane
) -> None:
    """Entities always belong to current winners and are never shared."""

    rng = random.Random(7)
    image_ids = ["img-a", "img-b", "img-c"]
    plane_ids = ["p1", "p2", "p3", "p4", "p5"]
    live = set()
    context = session.context

    for _ in range(400):
        clock.advance(rng.choice([0.05, 0.2, 0.7]))
        anchor_id = rng.choice(image_ids + plane_ids)
        if anchor_id in image_ids:
            detection = make_image(anchor_id, width=rng.uniform(0.1, 1.0))
        else:
            classification = "floor" if rng.random() > 0.1 else "wall"
            detection = make_plane(anchor_id, rng.uniform(0.5, 10.0), classification=classification)

        if anchor_id not in live:
            session.on_detections_added([detection])
            live.add(anchor_id)
        elif rng.random() < 0.25:
            session.on_detections_removed([detection])
            live.discard(anchor_id)
        else:
            session.on_detections_updated([detection])

        winners = {
            tracker.winner.anchor_id for tracker in context.trackers.values() if tracker.winner is not None
        }
        attached = context.registry.anchor_ids()
        assert set(attached) <= winners
        entities = [context.registry.entity_for(tracker.winner) for tracker in context.trackers.values() if tracker.winner]
        entities = [entity for entity in entities if entity is not None]
        assert len({id(entity) for entity in entities}) == len(entities)
        assert sorted(entity.entity_id for entity in renderer.scene.values()) == sorted(
            entity.entity_id for entity in entities
        )
        assert set(context.floor_tracker.candidates) <= live


def test_close_removes_entities_and_rejects_new_batches(session, renderer, make_image, make_plane) -> None:
    session.on_detections_added([make_image("poster"), make_plane("floor", 4.0)])

    session.close()
    session.close()

    assert renderer.scene == {}
    assert session.snapshot()["winners"] == {"image": None, "floor": None}
    with pytest.raises(SessionClosedError):
        session.on_detections_added([make_image("late")])


def test_new_session_starts_empty(renderer, settings, make_image) -> None:
    """Sessions never inherit tracked anchors from an earlier session."""

    first = SessionEventDispatcher(SessionContext.create(renderer, settings))
    first.on_detections_added([make_image("poster")])
    first.close()

    second = SessionEventDispatcher(SessionContext.create(renderer, settings))

    assert second.snapshot()["attached"] == []
    assert second.context.image_tracker.winner is None


def test_context_creates_configured_renderer() -> None:
    context = SessionContext.create(settings=AnchorSyncSettings(renderer="recording"))

    assert isinstance(context.registry.renderer, RecordingRenderer)
    assert context.registry.fail_fast is True


def test_production_environment_logs_instead_of_raising() -> None:
    context = SessionContext.create(settings=AnchorSyncSettings(environment="production"))

    assert context.registry.fail_fast is False
