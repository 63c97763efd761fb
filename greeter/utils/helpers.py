"""Helper utilities for Greeter."""

import asyncio
from typing import Generic, TypeVar
from fastapi import HTTPException, Request, status

T = TypeVar("T")


class QueueStream(Generic[T]):
    """Async iterator over values pushed into an asyncio queue.

    Never ends on its own; the consumer stops iterating or is cancelled.
    """

    def __init__(self, queue: asyncio.Queue[T]):
        self._queue = queue

    def __aiter__(self) -> "QueueStream[T]":
        return self

    async def __anext__(self) -> T:
        return await self._queue.get()


def latest_value_queue() -> asyncio.Queue:
    """Queue that only ever holds the most recent value; see ``put_latest``."""
    return asyncio.Queue(maxsize=1)


def put_latest(queue: asyncio.Queue[T], value: T) -> None:
    """Put ``value``, replacing an unconsumed older value if present."""
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(value)


def get_controller(request: Request):
    """Resolve the controller attached to the running application.

    Raises HTTPException 503 if the application has not started it yet.
    """
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Controller not started",
        )
    return controller
