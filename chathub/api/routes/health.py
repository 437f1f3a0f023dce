# chathub/api/routes/health.py

from fastapi import APIRouter

from chathub.core import state

router = APIRouter()

@router.get("/health")
async def health():
    """
    Health check endpoint.

    Returns:
        dict: "healthy" with the current participant count once the hub
        loop is running, "starting" before that
    """
    hub = state.room_hub
    if hub is None or not hub.running:
        return {"status": "starting", "participants": 0}

    return {
        "status": "healthy",
        "participants": hub.participant_count,
    }
