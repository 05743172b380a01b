"""Mini README: Replay recorded perception batches through a session.

Structure:
    * ScriptClock - clock advanced by the script instead of wall time.
    * ScriptedBatch - a converted, timed batch.
    * load_event_script - parse and validate a JSON event script.
    * replay_events - feed batches to a dispatcher and collect snapshots.

Scripts are JSON lists of ``{"at": seconds, "event": "added", "detections":
[...]}`` objects. Because the session reads time from the ``ScriptClock``,
floor recomputation throttling behaves the same on every replay.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from pydantic import TypeAdapter

from ..detections import Detection
from ..logging_utils import get_logger
from ..session import SessionEventDispatcher
from .schemas import BatchEvent, ScriptedBatchPayload, deliver

LOGGER = get_logger(__name__)

_SCRIPT_ADAPTER = TypeAdapter(List[ScriptedBatchPayload])


class ScriptClock:
    """Monotonic clock whose time is set by the replay script."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def advance_to(self, timestamp: float) -> None:
        if timestamp < self.now:
            raise ValueError(f"Cannot move the clock back from {self.now} to {timestamp}")
        self.now = timestamp

    def __call__(self) -> float:
        return self.now


@dataclass(slots=True)
class ScriptedBatch:
    at: float
    event: BatchEvent
    detections: List[Detection]


def load_event_script(path: Path) -> List[ScriptedBatch]:
    """Read a replay script, validating payloads and timestamp ordering."""

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise ValueError(f"Event script {path} is invalid JSON") from error
    payloads = _SCRIPT_ADAPTER.validate_python(raw)

    batches: List[ScriptedBatch] = []
    previous = 0.0
    for index, payload in enumerate(payloads):
        if payload.at < previous:
            raise ValueError(f"Batch {index} at {payload.at}s is earlier than the batch before it")
        previous = payload.at
        batches.append(
            ScriptedBatch(
                at=payload.at,
                event=payload.event,
                detections=[detection.to_detection() for detection in payload.detections],
            )
        )
    LOGGER.info("Loaded %s scripted batches from %s", len(batches), path)
    return batches


def replay_events(
    batches: List[ScriptedBatch],
    dispatcher: SessionEventDispatcher,
    clock: ScriptClock,
) -> List[Dict[str, Any]]:
    """Deliver each batch at its scripted time and return a snapshot after each one.

    The clock must be the one the dispatcher's session was created with.
    """

    snapshots: List[Dict[str, Any]] = []
    for batch in batches:
        clock.advance_to(batch.at)
        LOGGER.debug("t=%.3fs delivering %s batch of %s", batch.at, batch.event.value, len(batch.detections))
        deliver(dispatcher, batch.event, batch.detections)
        snapshot = dispatcher.snapshot()
        snapshot["at"] = batch.at
        snapshot["event"] = batch.event.value
        snapshots.append(snapshot)
    return snapshots
