"""Log dispatch to registered listeners, and a listener that keeps the messages."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional

ListenerFunction = Callable[[Any, "LogType", str], None]


class LogType(IntEnum):
    SUCCESS = 0
    NORMAL = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class _Listener:
    owner: Any
    function: ListenerFunction


class Logger:
    """Sends each message to every listener in the order they were added."""

    def __init__(self) -> None:
        self._listeners: list[_Listener] = []

    def add_listener(self, owner: Any, function: ListenerFunction) -> None:
        self._listeners.append(_Listener(owner, function))

    def remove_listener(self, owner: Any) -> None:
        """Remove the first listener registered for `owner`, if any."""
        for i, listener in enumerate(self._listeners):
            if listener.owner is owner:
                del self._listeners[i]
                return

    def log(self, log_type: LogType, text: str) -> None:
        for listener in list(self._listeners):
            listener.function(listener.owner, log_type, text)

    def log_formatted(self, log_type: LogType, fmt: str, *args: Any) -> None:
        """Log `fmt` with printf-style substitution of `args`."""
        self.log(log_type, fmt % args if args else fmt)


logger = Logger()


class LogListener:
    """Collects messages from a logger, keeping each distinct message once, newest last."""

    def __init__(self, source: Optional[Logger] = None) -> None:
        self._source = source if source is not None else logger
        self._logs: list[tuple[LogType, str]] = []
        self._lock = threading.Lock()

    @staticmethod
    def _receive(owner: "LogListener", log_type: LogType, text: str) -> None:
        entry = (log_type, text)
        with owner._lock:
            owner._logs = [item for item in owner._logs if item != entry]
            owner._logs.append(entry)

    def attach(self) -> None:
        self._source.add_listener(self, self._receive)

    def detach(self) -> None:
        self._source.remove_listener(self)

    def clear(self) -> None:
        with self._lock:
            self._logs.clear()

    def entries(self) -> list[tuple[LogType, str]]:
        with self._lock:
            return list(self._logs)

    def __enter__(self) -> "LogListener":
        self.attach()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.detach()