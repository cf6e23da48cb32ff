"""Labelling of 4-connected components over a subset of board cells."""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterator

from core import Pos, Region


@dataclass(frozen=True)
class Component:
    """One connected component. `cells` is in row-major order."""

    id: int
    cells: tuple[Pos, ...]

    @property
    def region(self) -> Region:
        return Region(frozenset(self.cells))

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class Components:
    """A partition of the included cells into connected components."""

    labels: dict[Pos, int]
    members: tuple[Component, ...]

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Component]:
        return iter(self.members)

    def component_of(self, pos: Pos) -> Component | None:
        """The component containing pos, or None if pos was not included."""
        label = self.labels.get(pos)
        return None if label is None else self.members[label]


def label_components(
    height: int, width: int, includes: Callable[[Pos], bool]
) -> Components:
    """Partition the included cells of a height x width board into 4-connected components.

    Components are numbered in the row-major order of their first cell, so the
    labelling is stable for a fixed board. `includes` is called at most once
    per cell and never for a cell off the board.
    """
    labels: dict[Pos, int] = {}
    members: list[Component] = []
    excluded: set[Pos] = set()

    def is_member(pos: Pos) -> bool:
        if pos in labels or pos in excluded:
            return False
        if includes(pos):
            return True
        excluded.add(pos)
        return False

    for row in range(height):
        for col in range(width):
            start = Pos(row, col)
            if not is_member(start):
                continue

            label = len(members)
            labels[start] = label
            cells = [start]
            queue = deque([start])
            while queue:
                cell = queue.popleft()
                for neighbor in cell.neighbors():
                    if not (0 <= neighbor.row < height and 0 <= neighbor.col < width):
                        continue
                    if is_member(neighbor):
                        labels[neighbor] = label
                        cells.append(neighbor)
                        queue.append(neighbor)

            members.append(Component(id=label, cells=tuple(sorted(cells))))

    return Components(labels=labels, members=tuple(members))
