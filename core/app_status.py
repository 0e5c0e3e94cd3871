from __future__ import annotations

import threading


class AppStatus:
    """Process-wide liveness flag shared by every request thread.

    Starts live. The only transition the service performs is live -> down;
    a restart of the process is the way back.
    """

    def __init__(self, live: bool = True):
        self._live = bool(live)
        self.lock = threading.Lock()

    def get_live(self) -> bool:
        with self.lock:
            return self._live

    def set_live(self, value: bool) -> None:
        with self.lock:
            self._live = bool(value)

    def label(self) -> str:
        return "UP" if self.get_live() else "DOWN"
