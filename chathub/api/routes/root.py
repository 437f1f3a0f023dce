# chathub/api/routes/root.py

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root():
    """
    Root endpoint.

    Plain-text liveness banner; the chat itself lives on /ws.
    """
    return "Simple Server"
