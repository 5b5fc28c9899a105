from __future__ import annotations

import threading
import time


class SystemClock:
    """Monotonic time source for job runners."""

    def now(self) -> float:
        return time.monotonic()

    def wait_until(self, deadline: float, cancelled: threading.Event) -> bool:
        """Block until `deadline` or until `cancelled` is set.

        Returns True if woken by cancellation.
        """
        while True:
            remaining = deadline - self.now()
            if remaining <= 0:
                return cancelled.is_set()
            if cancelled.wait(remaining):
                return True
