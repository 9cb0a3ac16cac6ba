"""Channel capability protocols and shared inbound-message dispatch.

The session layer only talks to these capabilities, so the real socket
channels and the in-memory doubles are interchangeable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

MessageHandler = Callable[[bytes], None]
CloseHandler = Callable[[], None]


@runtime_checkable
class ControlChannel(Protocol):
    """Reliable, ordered control transport (TCP on a real device)."""

    async def connect(self) -> bool: ...

    async def disconnect(self) -> None: ...

    async def send(self, data: bytes) -> bool: ...

    @property
    def is_connected(self) -> bool: ...

    def add_message_handler(self, handler: MessageHandler) -> None: ...

    def remove_message_handler(self, handler: MessageHandler) -> None: ...

    def add_close_handler(self, handler: CloseHandler) -> None: ...


@runtime_checkable
class StreamChannel(Protocol):
    """Lossy sample stream transport (UDP on a real device)."""

    async def start_listening(self) -> None: ...

    async def stop_listening(self) -> None: ...

    async def close(self) -> None: ...

    @property
    def is_listening(self) -> bool: ...

    def add_message_handler(self, handler: MessageHandler) -> None: ...

    def remove_message_handler(self, handler: MessageHandler) -> None: ...


class HandlerRegistry:
    """Inbound message and close notification fan-out.

    Handler exceptions are logged and never reach the transport loop.
    """

    def __init__(self) -> None:
        self._message_handlers: list[MessageHandler] = []
        self._close_handlers: list[CloseHandler] = []

    def add_message_handler(self, handler: MessageHandler) -> None:
        if handler not in self._message_handlers:
            self._message_handlers.append(handler)

    def remove_message_handler(self, handler: MessageHandler) -> None:
        if handler in self._message_handlers:
            self._message_handlers.remove(handler)

    def add_close_handler(self, handler: CloseHandler) -> None:
        if handler not in self._close_handlers:
            self._close_handlers.append(handler)

    def _dispatch_message(self, data: bytes) -> None:
        for handler in list(self._message_handlers):
            try:
                handler(data)
            except Exception as e:
                # One failing subscriber must not stop delivery to the others
                logger.exception(
                    "Message handler failed",
                    extra={
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                        "bytes": len(data),
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )

    def _dispatch_close(self) -> None:
        for handler in list(self._close_handlers):
            try:
                handler()
            except Exception as e:
                logger.exception(
                    "Close handler failed",
                    extra={"error": str(e), "error_type": type(e).__name__},
                )
