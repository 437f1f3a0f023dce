# chathub/services/identity.py

import threading


class IdentityCounter:
    """Mints "User1", "User2", ... for the lifetime of the counter. Numbers are never reused."""

    def __init__(self, prefix: str = "User") -> None:
        self.prefix = prefix
        self._last = 0
        self._lock = threading.Lock()

    @property
    def issued(self) -> int:
        return self._last

    def next_user(self) -> str:
        with self._lock:
            self._last += 1
            return f"{self.prefix}{self._last}"
