"""Navigation endpoints — single-user screen history for the app shell."""

from __future__ import annotations

import threading

from fastapi import APIRouter

from reserve.models.schemas import NavigateRequest, NavigationResponse
from reserve.core.navigation.history import NavHistory

router = APIRouter(tags=["navigation"])

# One history per process, like the single active user of the app shell.
_history = NavHistory()
_lock = threading.Lock()


def _snapshot() -> dict:
    return {
        "current": _history.current().to_dict(),
        "depth": len(_history),
        "can_go_back": _history.can_go_back,
    }


@router.get("/navigation", response_model=NavigationResponse)
async def navigation_state():
    with _lock:
        return _snapshot()


@router.post("/navigation/push", response_model=NavigationResponse)
async def push_screen(req: NavigateRequest):
    with _lock:
        _history.navigate(req.screen, req.payload)
        return _snapshot()


@router.post("/navigation/back", response_model=NavigationResponse)
async def go_back():
    """Pop one entry. At the root this is a no-op and the globe stays current."""
    with _lock:
        _history.pop()
        return _snapshot()


@router.post("/navigation/reset", response_model=NavigationResponse)
async def reset_history():
    with _lock:
        _history.reset()
        return _snapshot()
