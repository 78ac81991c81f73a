"""Unit tests for seed patterns and world snapshots."""

import pytest

from core.errors import PatternError
from life.cell import Status
from life.patterns import PATTERNS, build_initial_state, parse_rows
from life.state import WorldSnapshot
from life.world import Position, World


class TestPatterns:
    """Tests for the seed pattern generator."""

    def test_parse_rows(self):
        assert parse_rows(["#.", ".#"]) == [
            [Status.ALIVE, Status.DEAD],
            [Status.DEAD, Status.ALIVE],
        ]

    def test_blinker_centred_on_five_by_five(self):
        """Blinker lands in column 2, rows 1-3."""
        world = World(build_initial_state("blinker", 5, 5))
        assert world.alive_positions() == [Position(1, 2), Position(2, 2), Position(3, 2)]

    def test_board_has_requested_shape(self):
        board = build_initial_state("glider", 6, 8)
        assert len(board) == 6
        assert all(len(row) == 8 for row in board)

    def test_unknown_pattern_raises(self):
        with pytest.raises(PatternError) as excinfo:
            build_initial_state("spaceship-x", 5, 5)
        assert excinfo.value.context["pattern"] == "spaceship-x"

    def test_pattern_too_large_raises(self):
        with pytest.raises(PatternError):
            build_initial_state("beacon", 3, 3)

    @pytest.mark.parametrize("name", ["block", "beehive"])
    def test_still_lifes_do_not_change(self, name):
        world = World(build_initial_state(name, 6, 6))
        assert world.calculate_next_generation() == world

    @pytest.mark.parametrize("name", ["blinker", "toad", "beacon"])
    def test_oscillators_have_period_two(self, name):
        world = World(build_initial_state(name, 6, 6))
        first = world.calculate_next_generation()
        assert first != world
        assert first.calculate_next_generation() == world

    def test_every_pattern_builds(self):
        for name in PATTERNS:
            assert World(build_initial_state(name, 8, 8)).population > 0


class TestWorldSnapshot:
    """Tests for WorldSnapshot."""

    def test_from_world(self):
        world = World(build_initial_state("blinker", 5, 5)).calculate_next_generation()
        snap = WorldSnapshot.from_world(world, period=2)
        assert snap.generation == 1
        assert (snap.rows, snap.cols) == (5, 5)
        assert snap.alive == [(2, 1), (2, 2), (2, 3)]
        assert snap.period == 2

    def test_to_dict(self):
        snap = WorldSnapshot(generation=4, rows=3, cols=3, alive=[(0, 1)])
        d = snap.to_dict()
        assert d["generation"] == 4
        assert d["population"] == 1
        assert d["alive"] == [[0, 1]]
        assert d["period"] is None

    def test_has_id_and_timestamp(self):
        snap = WorldSnapshot(generation=0, rows=1, cols=1, alive=[])
        assert snap.id
        assert snap.timestamp.endswith("Z")

    def test_uses_slots(self):
        assert hasattr(WorldSnapshot, "__slots__")
