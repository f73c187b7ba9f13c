import threading


class CancellationRequested(Exception):
    """Raised to cooperatively abort work whose result is no longer wanted."""
    pass


class CancellationToken:
    """One-shot flag shared by the operations of a single load generation."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise CancellationRequested()

    def __repr__(self):
        return f"<CancellationToken cancelled={self.cancelled}>"


__all__ = ["CancellationRequested", "CancellationToken"]
