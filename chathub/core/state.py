# chathub/core/state.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from chathub.services.room_hub import RoomHub

# Created on startup so the hub's queues belong to the serving event loop
room_hub: Optional[RoomHub] = None

app_start_time: datetime = datetime.now(timezone.utc)
