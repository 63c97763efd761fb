"""State store with unidirectional data flow."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from greeter.models.state import AppState
from greeter.services.transitions import Event, reduce
from greeter.utils.helpers import QueueStream, latest_value_queue, put_latest

logger = logging.getLogger(__name__)


class StateStore:
    """Holds the single AppState value.

    State only changes through ``dispatch``. Subscribers receive the
    latest changed state; a slow subscriber skips superseded ones.
    """

    def __init__(self, initial: AppState | None = None):
        self._state = initial or AppState()
        self._subscribers: set[asyncio.Queue[AppState]] = set()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def dispatch(self, event: Event) -> AppState:
        """Apply an event and notify subscribers if the state changed."""
        previous = self._state
        current = reduce(previous, event)
        if current == previous:
            logger.debug(f"{type(event).__name__} left state unchanged")
            return current

        self._state = current
        logger.debug(
            f"{type(event).__name__}: auth={current.auth.status.value} "
            f"request={current.request.status.value}"
        )
        for queue in list(self._subscribers):
            put_latest(queue, current)
        return current

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[QueueStream[AppState]]:
        """Subscribe to state changes, starting with the current state."""
        queue: asyncio.Queue[AppState] = latest_value_queue()
        put_latest(queue, self._state)
        self._subscribers.add(queue)
        try:
            yield QueueStream(queue)
        finally:
            self._subscribers.discard(queue)
