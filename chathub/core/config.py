# chathub/core/config.py
import os
from typing import List
from dotenv import load_dotenv


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """
    Setup environment variables.
        - HOST / PORT the address uvicorn listens on
        - ALLOWED_ORIGINS comma-separated list of origins allowed to open /ws
        - MESSAGE_BUFFER_SIZE capacity of each participant's outbound queue
        - HUB_EVENT_BUFFER capacity of the hub's event queue
        - READ_TIMEOUT_SECONDS idle read timeout per connection (0 disables)
    """

    # Load environment variables from the .env file
    load_dotenv()

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))

    ALLOWED_ORIGINS: List[str] = _split_origins(
        os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")
    )

    MESSAGE_BUFFER_SIZE: int = int(os.getenv("MESSAGE_BUFFER_SIZE", "256"))
    HUB_EVENT_BUFFER: int = int(os.getenv("HUB_EVENT_BUFFER", "1"))
    READ_TIMEOUT_SECONDS: float = float(os.getenv("READ_TIMEOUT_SECONDS", "0"))

settings = Settings()
