"""Authentication API endpoints."""

from fastapi import APIRouter, Depends

from greeter.models.state import StateSnapshot
from greeter.services.controller import AppController
from greeter.services.presenter import build_snapshot
from greeter.utils.helpers import get_controller

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-in", response_model=StateSnapshot)
async def sign_in(controller: AppController = Depends(get_controller)) -> StateSnapshot:
    """Sign in anonymously. Failures are reported in the snapshot."""
    state = await controller.request_sign_in()
    return build_snapshot(state)


@router.post("/sign-out", response_model=StateSnapshot)
async def sign_out(controller: AppController = Depends(get_controller)) -> StateSnapshot:
    """Sign out of the current session."""
    state = await controller.request_sign_out()
    return build_snapshot(state)
