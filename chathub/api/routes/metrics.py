# chathub/api/routes/metrics.py
from fastapi import APIRouter
from datetime import datetime, timezone

from chathub.core import state

router = APIRouter()

@router.get("/metrics")
async def get_metrics():
    """
    Room hub counters.

    Example Response:
        {
            "participants": 3,
            "participants_admitted": 7,
            "messages_forwarded": 120,
            "messages_per_second": 0.03,
            "dropped_messages": 0,
            "max_queue_depth": 2,
            "uptime_hours": 1.1
        }

    `dropped_messages` counts envelopes discarded because a recipient's
    outbound queue was full. A growing value means some client is not
    reading fast enough. `max_queue_depth` is the longest outbound queue
    right now; a value close to MESSAGE_BUFFER_SIZE means drops are imminent.
    """
    uptime_seconds = (datetime.now(timezone.utc) - state.app_start_time).total_seconds()
    hub = state.room_hub

    forwarded = hub.messages_forwarded if hub else 0
    depths = hub.queue_depths() if hub else {}

    if uptime_seconds > 0:
        messages_per_second = forwarded / uptime_seconds
    else:
        messages_per_second = 0

    return {
        "participants": hub.participant_count if hub else 0,
        "participants_admitted": hub.participants_admitted if hub else 0,
        "messages_forwarded": forwarded,
        "messages_per_second": round(messages_per_second, 2),
        "dropped_messages": hub.dropped_messages if hub else 0,
        "max_queue_depth": max(depths.values(), default=0),
        "uptime_hours": round(uptime_seconds / 3600, 2) if uptime_seconds > 0 else 0,
    }
