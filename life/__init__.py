"""Bounded-domain Game of Life engine."""

from life.cell import Cell, Status
from life.world import Position, World

__all__ = ["Cell", "Position", "Status", "World"]
