"""Cancellation token for abandoning an in-flight refresh."""

from __future__ import annotations


class CancellationToken:
    """Flag checked before fetched results are written into state."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
