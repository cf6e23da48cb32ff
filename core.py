"""Core data structures and utilities."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, NewType


PlayerId = NewType("PlayerId", int)
BuildingId = NewType("BuildingId", int)


@dataclass(frozen=True, order=True)
class Pos:
    """A board cell. Orders row-major."""

    row: int
    col: int

    def neighbors(self) -> list[Pos]:
        """Orthogonal neighbors; may lie off the board."""
        return [
            Pos(self.row - 1, self.col),
            Pos(self.row, self.col - 1),
            Pos(self.row, self.col + 1),
            Pos(self.row + 1, self.col),
        ]

    def __add__(self, other: Pos) -> Pos:
        return Pos(self.row + other.row, self.col + other.col)


@dataclass(frozen=True)
class Region:
    """A set of positions."""

    cells: frozenset[Pos]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Pos]:
        return iter(sorted(self.cells))

    def get_border(self) -> set[Pos]:
        """Return cells outside the region that touch it orthogonally."""
        return {
            neighbor
            for cell in self.cells
            for neighbor in cell.neighbors()
            if neighbor not in self.cells
        }

    def is_connected(self) -> bool:
        if not self.cells:
            return True
        start = min(self.cells)
        seen = {start}
        stack = [start]
        while stack:
            cell = stack.pop()
            for neighbor in cell.neighbors():
                if neighbor in self.cells and neighbor not in seen:
                    seen.add(neighbor)
                    stack.append(neighbor)
        return len(seen) == len(self.cells)
