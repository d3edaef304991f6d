import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

MAX_EVENTS = 100


class WarningKind(str, Enum):
    BUDGET_EXCEEDED = "budget_exceeded"
    OVERSPEND = "overspend"


@dataclass(frozen=True)
class LedgerWarning:
    kind: WarningKind
    login: str
    message: str
    limit: float
    actual: float
    category: str | None = None


Listener = Callable[[LedgerWarning], None]


class Notifier:
    """Collects ledger warnings and forwards them to subscribed listeners.

    Warnings are observational only; emitting one never touches wallet state.
    """

    def __init__(
        self, listeners: list[Listener] | None = None, max_events: int = MAX_EVENTS
    ) -> None:
        self._listeners: list[Listener] = list(listeners or [])
        # Most recent warnings only; older ones are dropped.
        self.events: deque[LedgerWarning] = deque(maxlen=max_events)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, warning: LedgerWarning) -> None:
        self.events.append(warning)
        logger.info("%s login=%s: %s", warning.kind.value, warning.login, warning.message)
        for listener in list(self._listeners):
            listener(warning)

    def clear(self) -> None:
        self.events.clear()
