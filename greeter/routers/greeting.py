"""Greeting API endpoints."""

from fastapi import APIRouter, Depends

from greeter.models.state import StateSnapshot
from greeter.services.controller import AppController
from greeter.services.presenter import build_snapshot
from greeter.utils.helpers import get_controller

router = APIRouter(prefix="/greeting", tags=["greeting"])


@router.post("/fetch", response_model=StateSnapshot)
async def fetch_greeting(controller: AppController = Depends(get_controller)) -> StateSnapshot:
    """Fetch the greeting from the server.

    Requires an active session; otherwise the snapshot reports
    ``requires_auth`` and no request is made.
    """
    state = await controller.fetch()
    return build_snapshot(state)
