"""Mini README: FastAPI perception bridge for AnchorSync.

Structure:
    * create_application - application factory wiring routes to one session.

A perception client (a device streaming ARKit callbacks, a simulator, a
recorded log) posts detection batches to ``/detections/{event}``. The app
keeps a single session and exposes the resulting scene and tracker state.
Handlers are ``async`` so every batch is processed on the event loop, one
at a time, which is the threading model the engine expects.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ..configuration import AnchorSyncSettings, get_settings
from ..errors import SessionClosedError
from ..logging_utils import get_logger
from ..rendering import REGISTRY, RenderingCollaborator
from ..session import SessionContext, SessionEventDispatcher
from .schemas import BatchEvent, DetectionPayload, deliver

LOGGER = get_logger(__name__)


def create_application(
    settings: Optional[AnchorSyncSettings] = None,
    renderer: Optional[RenderingCollaborator] = None,
) -> FastAPI:
    """Create the FastAPI application bound to a fresh session."""

    settings = settings or get_settings()
    app = FastAPI(title="AnchorSync Perception Bridge", version="0.1.0")
    state: Dict[str, SessionEventDispatcher] = {
        "dispatcher": SessionEventDispatcher(SessionContext.create(renderer, settings))
    }

    def scene_payload(dispatcher: SessionEventDispatcher) -> Dict[str, Any]:
        active_renderer = dispatcher.context.registry.renderer
        snapshot = getattr(active_renderer, "snapshot", None)
        return {
            "renderer": active_renderer.metadata(),
            "entities": snapshot() if callable(snapshot) else [],
        }

    @app.post("/detections/{event}")
    async def receive_batch(event: BatchEvent, payloads: List[DetectionPayload]) -> JSONResponse:
        """Deliver a batch of detections to the session."""

        try:
            detections = [payload.to_detection() for payload in payloads]
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        dispatcher = state["dispatcher"]
        try:
            deliver(dispatcher, event, detections)
        except SessionClosedError as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        LOGGER.debug("Processed %s batch of %s detections", event.value, len(detections))
        return JSONResponse(dispatcher.snapshot())

    @app.get("/session")
    async def session_state() -> JSONResponse:
        """Return winners, candidates and attached anchors."""

        return JSONResponse(state["dispatcher"].snapshot())

    @app.get("/scene")
    async def scene() -> JSONResponse:
        """Return the entities currently in the renderer's scene."""

        return JSONResponse(scene_payload(state["dispatcher"]))

    @app.post("/session/close")
    async def close_session() -> JSONResponse:
        """End the session and remove every entity."""

        dispatcher = state["dispatcher"]
        dispatcher.close()
        return JSONResponse(dispatcher.snapshot())

    @app.post("/session/reset")
    async def reset_session() -> JSONResponse:
        """Close the current session and start an empty one on the same renderer."""

        previous = state["dispatcher"]
        previous.close()
        state["dispatcher"] = SessionEventDispatcher(
            SessionContext.create(previous.context.registry.renderer, settings)
        )
        LOGGER.info("Session reset")
        return JSONResponse(state["dispatcher"].snapshot())

    @app.get("/renderers")
    async def renderers() -> JSONResponse:
        """List the renderer identifiers hosts can configure."""

        return JSONResponse({"renderers": REGISTRY.names()})

    return app
