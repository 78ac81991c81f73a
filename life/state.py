import uuid

from utils.timestamp import format_timestamp


class WorldSnapshot:
    """Serializable view of one generation, safe to publish on the bus."""

    __slots__ = ("id", "timestamp", "generation", "rows", "cols", "alive", "period")

    def __init__(self, generation, rows, cols, alive, period=None, id=None, timestamp=None):
        self.id = id or uuid.uuid4().hex
        self.timestamp = timestamp or format_timestamp()
        self.generation = generation
        self.rows = rows
        self.cols = cols
        self.alive = alive
        self.period = period

    @classmethod
    def from_world(cls, world, period=None):
        rows, cols = world.shape
        alive = [(position.x, position.y) for position in world.alive_positions()]
        return cls(world.generation_count, rows, cols, alive, period=period)

    @property
    def population(self):
        return len(self.alive)

    def to_dict(self):
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "generation": self.generation,
            "rows": self.rows,
            "cols": self.cols,
            "population": self.population,
            "period": self.period,
            "alive": [[x, y] for x, y in self.alive],
        }
