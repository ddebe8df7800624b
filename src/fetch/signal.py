from __future__ import annotations
import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Callable

from core.exceptions import AbortError


@dataclass(frozen=True)
class AbortEvent:
    type: str
    target: AbortSignal


EventHandler = Callable[[AbortEvent], None]


class AbortSignal:
    """
    Cancellation token shared between a caller and any number of observers.
    Listeners are called synchronously, in registration order, when the
    signal aborts. A listener that raises is logged and does not stop the
    listeners after it.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._reason: Any = None
        self._listeners: dict[str, list[EventHandler]] = {}
        self._logger = logging.getLogger(f"[{self.__class__.__name__}]")

    @classmethod
    def abort(cls, reason: Any = None) -> AbortSignal:
        """Return a signal that is already aborted."""
        signal = cls()
        signal._signal_abort(reason)
        return signal

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def throw_if_aborted(self) -> None:
        if not self._aborted:
            return
        if isinstance(self._reason, BaseException):
            raise self._reason
        raise AbortError()

    def add_event_listener(self, type: str, handler: EventHandler) -> None:
        handlers = self._listeners.setdefault(type, [])
        if handler not in handlers:
            handlers.append(handler)

    def remove_event_listener(self, type: str, handler: EventHandler) -> None:
        handlers = self._listeners.get(type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def listener_count(self, type: str = "abort") -> int:
        return len(self._listeners.get(type, ()))

    def dispatch_event(self, type: str) -> None:
        event = AbortEvent(type=type, target=self)
        for handler in list(self._listeners.get(type, ())):
            try:
                handler(event)
            except Exception as e:
                self._logger.error(f"Listener {handler!r} for '{type}' raised: {e}", exc_info=e)

    def _signal_abort(self, reason: Any = None) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason if reason is not None else AbortError("This operation was aborted")
        self.dispatch_event("abort")

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self._aborted})"


class AbortController:
    """Owns an AbortSignal and is the only party allowed to abort it."""

    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: Any = None) -> None:
        self._signal._signal_abort(reason)


class AbortSubscription:
    """
    One abort listener registration, held as a scoped resource. Entering
    registers `handler` on the signal; release() and exit remove it. Release
    is idempotent, and a missing signal makes the subscription a no-op.
    """

    def __init__(self, signal: AbortSignal | None, handler: EventHandler) -> None:
        self._signal = signal
        self._handler = handler
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def __enter__(self) -> AbortSubscription:
        if self._signal is not None and not self._active:
            self._signal.add_event_listener("abort", self._handler)
            self._active = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        self._signal.remove_event_listener("abort", self._handler)
