"""
Change notification for the wizard state objects.

Each state publishes a StateChange after a mutation is fully applied, so a
subscriber reading derived values always sees the new state.
"""

from typing import Callable, NamedTuple


class StateChange(NamedTuple):
    source: str
    field: str
    person_ids: tuple[str, ...] = ()


Listener = Callable[[StateChange], None]


class Observable:
    """Minimal synchronous publish/subscribe; listeners run in subscription order."""

    _source = "state"

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, field: str, person_ids: tuple[str, ...] = ()) -> None:
        self._publish(StateChange(source=self._source, field=field, person_ids=person_ids))

    def _publish(self, change: StateChange) -> None:
        for listener in list(self._listeners):
            listener(change)
