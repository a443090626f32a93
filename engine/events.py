from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Tuple

from engine.domain import Budget, Expense

__all__ = ['EXPENSES_CHANGED', 'BUDGETS_CHANGED', 'Event', 'EventBus', 'Snapshot', 'SnapshotFeed']

EXPENSES_CHANGED = "EXPENSES_CHANGED"
BUDGETS_CHANGED = "BUDGETS_CHANGED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class Snapshot(NamedTuple):
    version: int
    expenses: Tuple[Expense, ...]
    budgets: Tuple[Budget, ...]


Handler = Callable[[Event, dict], object]


class EventBus:
    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._subscribers: Dict[str, List[Handler]] = {}
        self._clock = clock

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        self._subscribers.setdefault(name, []).append(handler)
        return lambda: self.unsubscribe(name, handler)

    def publish(self, name: str, payload: dict) -> list:
        handlers = list(self._subscribers.get(name, ()))
        if not handlers:
            return []

        event = Event(name=name, ts=self._clock().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, ()):
            self._subscribers[name].remove(handler)


class SnapshotFeed:
    """Holds the latest full snapshot of one owner's records.

    Every change replaces the whole snapshot and bumps its version; listeners
    receive the complete snapshot, never a delta.
    """

    def __init__(self, expenses=(), budgets=(), bus: EventBus | None = None):
        self.bus = bus or EventBus()
        self._snapshot = Snapshot(0, tuple(expenses), tuple(budgets))

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def subscribe(self, callback: Callable[[Snapshot], object]) -> Callable[[], None]:
        """Call ``callback`` with each new snapshot; returns the unsubscribe function."""
        def handler(event: Event, payload: dict):
            return callback(payload["snapshot"])

        unsubs = [self.bus.subscribe(EXPENSES_CHANGED, handler), self.bus.subscribe(BUDGETS_CHANGED, handler)]

        def unsubscribe() -> None:
            for u in unsubs:
                u()

        return unsubscribe

    def set_expenses(self, expenses) -> Snapshot:
        self._snapshot = Snapshot(self._snapshot.version + 1, tuple(expenses), self._snapshot.budgets)
        self.bus.publish(EXPENSES_CHANGED, {"snapshot": self._snapshot})
        return self._snapshot

    def set_budgets(self, budgets) -> Snapshot:
        self._snapshot = Snapshot(self._snapshot.version + 1, self._snapshot.expenses, tuple(budgets))
        self.bus.publish(BUDGETS_CHANGED, {"snapshot": self._snapshot})
        return self._snapshot
