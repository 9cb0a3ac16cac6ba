"""Single in-flight control request slot."""

from __future__ import annotations

import asyncio
import logging
import threading
import time

from netsdr_client.correlation import generate_correlation_id
from netsdr_client.session.types import PendingRequest
from netsdr_client.transport.exceptions import RequestInFlightError

logger = logging.getLogger(__name__)


def _set_result(future: asyncio.Future[bytes], reply: bytes) -> None:
    if not future.done():
        future.set_result(reply)


def _set_exception(future: asyncio.Future[bytes], error: BaseException) -> None:
    if not future.done():
        future.set_exception(error)


class PendingRequestSlot:
    """Holds at most one control request awaiting its reply.

    The critical sections never await, so a threading.Lock is enough and
    resolve()/fail() can be called from any thread; the future is completed
    on its own loop through call_soon_threadsafe.

    A request leaves the slot when it is resolved, failed, or released by
    the waiter, whichever happens first.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: PendingRequest | None = None

    def register(self, frame: bytes) -> PendingRequest:
        """Occupy the slot with a new request.

        Raises:
            RequestInFlightError: If a request is already pending
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._pending is not None:
                raise RequestInFlightError(self._pending.correlation_id)
            pending = PendingRequest(
                frame=frame,
                correlation_id=generate_correlation_id(),
                sent_at=time.perf_counter(),
                future=loop.create_future(),
            )
            self._pending = pending
        return pending

    def resolve(self, reply: bytes) -> PendingRequest | None:
        """Complete the pending request with a reply.

        Returns:
            The resolved request, or None if nothing was pending
        """
        with self._lock:
            pending = self._pending
            self._pending = None
        if pending is None:
            return None
        pending.future.get_loop().call_soon_threadsafe(_set_result, pending.future, bytes(reply))
        return pending

    def fail(self, error: BaseException) -> PendingRequest | None:
        """Fail the pending request.

        Returns:
            The failed request, or None if nothing was pending
        """
        with self._lock:
            pending = self._pending
            self._pending = None
        if pending is None:
            return None
        logger.debug(
            "Failing pending request: %s",
            error,
            extra={"correlation_id": pending.correlation_id, "error_type": type(error).__name__},
        )
        pending.future.get_loop().call_soon_threadsafe(_set_exception, pending.future, error)
        return pending

    def release(self, pending: PendingRequest) -> None:
        """Free the slot if it still holds ``pending``."""
        with self._lock:
            if self._pending is pending:
                self._pending = None

    @property
    def current(self) -> PendingRequest | None:
        """The request awaiting a reply, if any."""
        return self._pending

    @property
    def is_pending(self) -> bool:
        return self._pending is not None
