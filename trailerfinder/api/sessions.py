"""Viewer session API routes (drive the discovery controller)"""

from fastapi import APIRouter, Depends, HTTPException, Request

from ..core.controller import DiscoveryController
from ..core.sessions import SessionRegistry
from ..schemas.movie import TrailerResponse
from ..schemas.session import (
    ModalClick,
    ScrollEvent,
    SearchUpdate,
    SentinelEvent,
    SentinelResult,
    SessionState,
)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def get_registry(request: Request) -> SessionRegistry:
    """Get the session registry"""
    registry = getattr(request.app.state, "sessions", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="TMDB API token not configured")
    return registry


async def get_controller(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
) -> DiscoveryController:
    """Look up a live session or 404"""
    controller = await registry.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return controller


@router.post("", response_model=SessionState, status_code=201)
async def create_session(registry: SessionRegistry = Depends(get_registry)):
    """Start a session: loads trending and the first discover page"""
    controller = await registry.create()
    return controller.snapshot()


@router.get("/{session_id}", response_model=SessionState)
async def get_session(controller: DiscoveryController = Depends(get_controller)):
    """Current state of a session"""
    return controller.snapshot()


@router.put("/{session_id}/search", response_model=SessionState)
async def update_search(
    data: SearchUpdate, controller: DiscoveryController = Depends(get_controller)
):
    """Keystroke in the search box (committed after the debounce window)"""
    controller.set_search_term(data.term)
    return controller.snapshot()


@router.post("/{session_id}/sentinel", response_model=SentinelResult)
async def sentinel_visible(
    data: SentinelEvent, controller: DiscoveryController = Depends(get_controller)
):
    """Report sentinel visibility; may start loading the next page"""
    triggered = controller.sentinel_visible(data.ratio)
    return SentinelResult(triggered=triggered, state=controller.snapshot())


@router.post("/{session_id}/scroll", response_model=SessionState)
async def scrolled(
    data: ScrollEvent, controller: DiscoveryController = Depends(get_controller)
):
    """Report page scroll offset"""
    controller.scrolled_to(data.offset)
    return controller.snapshot()


@router.post("/{session_id}/trailers/{movie_id}", response_model=TrailerResponse)
async def play_trailer(
    movie_id: int, controller: DiscoveryController = Depends(get_controller)
):
    """Open the trailer modal for a movie card"""
    lookup = await controller.play_trailer(movie_id)
    return lookup.to_response()


@router.post("/{session_id}/modal", response_model=SessionState)
async def modal_click(
    data: ModalClick, controller: DiscoveryController = Depends(get_controller)
):
    """Click inside the trailer modal"""
    controller.modal_click(data.target)
    return controller.snapshot()


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Tear a session down"""
    if not await registry.close(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
