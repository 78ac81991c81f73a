"""Cell state and the birth/survival transition rule."""

from enum import Enum


class Status(Enum):
    ALIVE = "alive"
    DEAD = "dead"


class Cell:
    """Immutable cell value. Evolving produces a new Cell."""

    __slots__ = ("_status",)

    def __init__(self, status):
        object.__setattr__(self, "_status", status)

    @property
    def status(self):
        return self._status

    @property
    def is_alive(self):
        return self._status is Status.ALIVE

    def evolve(self, neighbours):
        """Next cell given the count of alive neighbours (B3/S23)."""
        if self._status is Status.ALIVE:
            return Cell(_status_for_alive_cell(neighbours))
        return Cell(_status_for_dead_cell(neighbours))

    def __setattr__(self, name, value):
        raise AttributeError("Cell is immutable")

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self._status is other._status

    def __hash__(self):
        return hash(self._status)

    def __repr__(self):
        return f"Cell({self._status.name})"


def _status_for_alive_cell(neighbours):
    return Status.ALIVE if neighbours in (2, 3) else Status.DEAD


def _status_for_dead_cell(neighbours):
    return Status.ALIVE if neighbours == 3 else Status.DEAD
