"""Cooperative cancellation for uploads."""

import asyncio
from typing import Optional, Union
from .exceptions import UraniumError


class CancellationToken:
    """
    Cancellation signal threaded through one upload.
    Cancelling is idempotent and never reverts.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self, message: str = "Upload cancelled by user", code: str = "UPLOAD_CANCELLED", **details) -> None:
        if self.cancelled:
            raise UraniumError.cancelled(message, code, **details)

    @classmethod
    def from_event(cls, event: asyncio.Event) -> "CancellationToken":
        """Wrap an existing asyncio.Event as a token."""
        token = cls()
        token._event = event
        return token


def ensure_token(
    signal: Union[CancellationToken, asyncio.Event, None],
) -> Optional[CancellationToken]:
    """Normalize the supported cancellation signals to a token."""
    if signal is None or isinstance(signal, CancellationToken):
        return signal
    if isinstance(signal, asyncio.Event):
        return CancellationToken.from_event(signal)
    raise TypeError(f"Unsupported cancellation signal: {type(signal).__name__}")


async def cancellable_sleep(delay: float, token: Optional[CancellationToken] = None) -> None:
    """
    Sleep for ``delay`` seconds, waking early if the token is cancelled.
    Raises a cancellation error when woken by the token.
    """
    if token is None:
        await asyncio.sleep(delay)
        return

    token.raise_if_cancelled()
    try:
        await asyncio.wait_for(token.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return
    raise UraniumError.cancelled()
