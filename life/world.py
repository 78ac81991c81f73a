"""World: an immutable generation of cells over a fixed coordinate domain.

The domain is the set of positions given at construction. Stepping evaluates
every owned cell against the current generation and returns a new World with
the same domain; positions outside it never come alive. There is no
wraparound.
"""

from types import MappingProxyType

from core.errors import DomainShapeError, EmptyDomainError
from life.cell import Cell


class Position:
    """Integer grid coordinate usable as a mapping key."""

    __slots__ = ("x", "y")

    def __init__(self, x, y):
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __setattr__(self, name, value):
        raise AttributeError("Position is immutable")

    @property
    def right(self):
        return Position(self.x + 1, self.y)

    @property
    def left(self):
        return Position(self.x - 1, self.y)

    @property
    def top(self):
        return Position(self.x, self.y + 1)

    @property
    def bottom(self):
        return Position(self.x, self.y - 1)

    @property
    def right_top(self):
        return Position(self.x + 1, self.y + 1)

    @property
    def right_bottom(self):
        return Position(self.x + 1, self.y - 1)

    @property
    def left_top(self):
        return Position(self.x - 1, self.y + 1)

    @property
    def left_bottom(self):
        return Position(self.x - 1, self.y - 1)

    def neighbours(self):
        """The 8 adjacent positions. No bounds checking."""
        return (
            self.right, self.right_top, self.right_bottom,
            self.left, self.left_top, self.left_bottom,
            self.top, self.bottom,
        )

    def __iter__(self):
        yield self.x
        yield self.y

    def __eq__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __lt__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return (self.x, self.y) < (other.x, other.y)

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"Position({self.x}, {self.y})"


class World:
    """One generation of the automaton.

    Built from a rectangular table of statuses: row index is ``x``, column
    index is ``y``. Dead cells are real entries of the domain and count as
    neighbours like any other owned position.

    Two worlds compare equal when their cells are equal, whatever their
    ``generation_count``.
    """

    __slots__ = ("_cells", "_generation_count")

    def __init__(self, initial_state):
        rows = [list(row) for row in initial_state]
        if not rows:
            raise EmptyDomainError("World cannot be empty")

        expected = len(rows[0])
        cells = {}
        for x, row in enumerate(rows):
            if len(row) != expected:
                raise DomainShapeError("Initial state must be rectangular",
                                       row=x, length=len(row), expected=expected)
            for y, status in enumerate(row):
                cells[Position(x, y)] = Cell(status)

        if not cells:
            raise EmptyDomainError("World cannot be empty", context={"rows": len(rows)})

        self._cells = cells
        self._generation_count = 0

    @classmethod
    def from_cells(cls, cells, generation_count=0):
        """Build a world over an arbitrary, possibly sparse, set of positions."""
        if not cells:
            raise EmptyDomainError("World cannot be empty")
        world = cls.__new__(cls)
        world._cells = dict(cells)
        world._generation_count = generation_count
        return world

    @property
    def generation_count(self):
        return self._generation_count

    @property
    def cells(self):
        return MappingProxyType(self._cells)

    @property
    def positions(self):
        return frozenset(self._cells)

    @property
    def population(self):
        return sum(1 for cell in self._cells.values() if cell.is_alive)

    @property
    def bounds(self):
        """(min_x, min_y, max_x, max_y) of the domain."""
        xs = [position.x for position in self._cells]
        ys = [position.y for position in self._cells]
        return min(xs), min(ys), max(xs), max(ys)

    @property
    def shape(self):
        """(rows, cols) of the domain's bounding box."""
        min_x, min_y, max_x, max_y = self.bounds
        return max_x - min_x + 1, max_y - min_y + 1

    def status_at(self, position):
        cell = self._cells.get(position)
        return cell.status if cell is not None else None

    def alive_positions(self):
        return sorted(position for position, cell in self._cells.items() if cell.is_alive)

    def calculate_alive_neighbours(self, position):
        """Count alive cells around ``position``; 0 if it is outside the domain."""
        if position not in self._cells:
            return 0

        alive_neighbours = 0
        for neighbour in position.neighbours():
            cell = self._cells.get(neighbour)
            if cell is not None and cell.is_alive:
                alive_neighbours += 1
        return alive_neighbours

    def calculate_next_generation(self):
        """Return the next generation as a new World; ``self`` is untouched."""
        next_generation = {
            position: cell.evolve(self.calculate_alive_neighbours(position))
            for position, cell in self._cells.items()
        }
        return World.from_cells(next_generation, self.generation_count + 1)

    def __len__(self):
        return len(self._cells)

    def __contains__(self, position):
        return position in self._cells

    def __eq__(self, other):
        if not isinstance(other, World):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None

    def __repr__(self):
        rows, cols = self.shape
        return (f"World(generation={self.generation_count}, shape={rows}x{cols}, "
                f"population={self.population})")
