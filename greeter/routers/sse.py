"""State snapshot endpoints, including a Server-Sent Events stream."""

import json
import logging
from typing import AsyncGenerator
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from greeter.models.state import StateSnapshot
from greeter.services.controller import AppController
from greeter.services.presenter import build_snapshot
from greeter.utils.helpers import get_controller

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/state", tags=["state"])


def format_event(event_type: str, payload: dict) -> str:
    """Format one SSE ``data:`` frame."""
    return f"data: {json.dumps({'type': event_type, **payload})}\n\n"


async def generate_state_events(
    controller: AppController,
    request: Request,
) -> AsyncGenerator[str, None]:
    """Generate SSE events for every state change.

    The first event carries the current state.
    """
    async with controller.subscribe() as states:
        yield format_event("connected", {})

        async for state in states:
            if await request.is_disconnected():
                break
            snapshot = build_snapshot(state)
            yield format_event("state", {"snapshot": snapshot.model_dump(mode="json")})

    logger.debug("State stream closed")


@router.get("", response_model=StateSnapshot)
async def get_state(controller: AppController = Depends(get_controller)) -> StateSnapshot:
    """Get the current state snapshot."""
    return controller.snapshot()


@router.get("/stream")
async def stream_state(
    request: Request,
    controller: AppController = Depends(get_controller),
) -> StreamingResponse:
    """Stream state snapshots as Server-Sent Events."""
    return StreamingResponse(
        generate_state_events(controller, request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
