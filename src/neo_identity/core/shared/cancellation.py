"""Cooperative cancellation signal passed through every I/O call."""

import asyncio
from typing import Optional


class CancellationToken:
    """Cooperative cancellation flag checked at I/O boundaries.

    Cancelling the token does not interrupt running work; callees check it
    before each round trip and raise ``asyncio.CancelledError``.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @classmethod
    def none(cls) -> "CancellationToken":
        """Token that is never cancelled by anyone else."""
        return cls()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            raise asyncio.CancelledError("Operation was cancelled")

    async def wait(self) -> None:
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancellation_requested})"


def ensure_token(token: Optional[CancellationToken]) -> CancellationToken:
    """Return the given token or a fresh never-cancelled one."""
    return token if token is not None else CancellationToken.none()
