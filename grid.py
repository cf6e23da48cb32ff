"""Read-only board snapshot: occupancy and building identity per cell."""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

import numpy as np

from core import BuildingId, PlayerId, Pos, Region
from errors import InconsistentBuilding, OutOfBounds
from pieces import PieceKind, footprint, rotate, shape


# Codes in the owners array. Player ids are the non-negative codes.
EMPTY = -1
NEUTRAL = -2

# Code in the building_ids array for a cell no building covers.
NO_BUILDING = -1


# What a cell can hold
@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class OwnedBy:
    player: PlayerId


@dataclass(frozen=True)
class Neutral:
    pass


CellState = Empty | OwnedBy | Neutral


@dataclass(frozen=True)
class Building:
    """A placed piece. `owner` is None for the Cathedral."""

    id: BuildingId
    owner: PlayerId | None
    cells: frozenset[Pos]
    kind: PieceKind | None = None

    @property
    def is_neutral(self) -> bool:
        return self.owner is None

    @property
    def state(self) -> CellState:
        return Neutral() if self.owner is None else OwnedBy(self.owner)

    @classmethod
    def place(
        cls,
        building_id: BuildingId,
        kind: PieceKind,
        origin: Pos,
        owner: PlayerId | None = None,
        quarter_turns: int = 0,
        mirrored: bool = False,
    ) -> Building:
        """Build a piece of the given kind with its layout's top-left corner at origin.

        The layout is mirrored first (chiral kinds only), then rotated clockwise
        by `quarter_turns`.
        """
        if (kind == PieceKind.CATHEDRAL) != (owner is None):
            raise ValueError(
                f"{kind.name} cannot be placed with owner {owner!r}: "
                "only the Cathedral is neutral"
            )
        layout = rotate(shape(kind, mirrored=mirrored), quarter_turns)
        return cls(
            id=building_id, owner=owner, cells=footprint(layout, origin), kind=kind
        )


@dataclass(frozen=True, eq=False)
class Grid:
    """Immutable board snapshot.

    `owners[row, col]` is a player id, EMPTY or NEUTRAL; `building_ids[row, col]`
    is the id of the building covering the cell, or NO_BUILDING. Both arrays are
    copied and made read-only and the building tables are read-only mappings,
    so a Grid can be shared freely between readers.
    """

    height: int
    width: int
    owners: np.ndarray
    building_ids: np.ndarray
    kinds: Mapping[BuildingId, PieceKind] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.height <= 0 or self.width <= 0:
            raise ValueError(f"Board must be non-empty, got {self.height}x{self.width}")
        for name in ("owners", "building_ids"):
            array = np.asarray(getattr(self, name))
            if not np.issubdtype(array.dtype, np.integer):
                raise InconsistentBuilding(
                    f"{name} must hold integer codes, got {array.dtype}"
                )
            array = array.astype(np.int64)
            if array.shape != (self.height, self.width):
                raise InconsistentBuilding(
                    f"{name} has shape {array.shape}, expected {(self.height, self.width)}"
                )
            array.flags.writeable = False
            object.__setattr__(self, name, array)
        object.__setattr__(self, "kinds", MappingProxyType(dict(self.kinds)))

    @classmethod
    def empty(cls, height: int, width: int) -> Grid:
        return cls(
            height=height,
            width=width,
            owners=np.full((height, width), EMPTY, dtype=np.int64),
            building_ids=np.full((height, width), NO_BUILDING, dtype=np.int64),
        )

    @classmethod
    def from_buildings(
        cls, height: int, width: int, buildings: Iterable[Building]
    ) -> Grid:
        """Lay buildings onto an empty board.

        Raises:
            OutOfBounds: a building covers a cell off the board.
            InconsistentBuilding: buildings overlap, share an id, or one is empty.
        """
        owners = np.full((height, width), EMPTY, dtype=np.int64)
        building_ids = np.full((height, width), NO_BUILDING, dtype=np.int64)
        kinds: dict[BuildingId, PieceKind] = {}
        seen: set[BuildingId] = set()

        for building in buildings:
            if building.id in seen:
                raise InconsistentBuilding(f"Duplicate building id {building.id}")
            if building.id < 0:
                raise InconsistentBuilding(f"Building id must be non-negative, got {building.id}")
            if building.owner is not None and building.owner < 0:
                raise InconsistentBuilding(
                    f"Building {building.id} has invalid owner {building.owner}"
                )
            if not building.cells:
                raise InconsistentBuilding(f"Building {building.id} covers no cells")
            seen.add(building.id)
            if building.kind is not None:
                kinds[building.id] = building.kind

            code = NEUTRAL if building.owner is None else building.owner
            for pos in building.cells:
                if not (0 <= pos.row < height and 0 <= pos.col < width):
                    raise OutOfBounds(pos, height, width)
                if building_ids[pos.row, pos.col] != NO_BUILDING:
                    raise InconsistentBuilding(
                        f"Building {building.id} overlaps building "
                        f"{building_ids[pos.row, pos.col]} at ({pos.row}, {pos.col})"
                    )
                owners[pos.row, pos.col] = code
                building_ids[pos.row, pos.col] = building.id

        return cls(
            height=height,
            width=width,
            owners=owners,
            building_ids=building_ids,
            kinds=kinds,
        )

    def in_bounds(self, pos: Pos) -> bool:
        return 0 <= pos.row < self.height and 0 <= pos.col < self.width

    def _check(self, pos: Pos) -> None:
        if not self.in_bounds(pos):
            raise OutOfBounds(pos, self.height, self.width)

    def is_on_boundary(self, pos: Pos) -> bool:
        """Check if pos lies in the outermost ring of the board."""
        self._check(pos)
        return (
            pos.row == 0
            or pos.col == 0
            or pos.row == self.height - 1
            or pos.col == self.width - 1
        )

    def positions(self) -> Iterator[Pos]:
        """All cells, row-major."""
        for row in range(self.height):
            for col in range(self.width):
                yield Pos(row, col)

    def occupancy(self, pos: Pos) -> CellState:
        self._check(pos)
        code = int(self.owners[pos.row, pos.col])
        if code == EMPTY:
            return Empty()
        if code == NEUTRAL:
            return Neutral()
        return OwnedBy(PlayerId(code))

    def is_owned_by(self, pos: Pos, player: PlayerId) -> bool:
        self._check(pos)
        return int(self.owners[pos.row, pos.col]) == player

    def is_capturable_for(self, pos: Pos, mover: PlayerId) -> bool:
        """Empty, neutral, or owned by anyone but the mover."""
        return not self.is_owned_by(pos, mover)

    def building_id_at(self, pos: Pos) -> BuildingId | None:
        self._check(pos)
        building_id = int(self.building_ids[pos.row, pos.col])
        return None if building_id == NO_BUILDING else BuildingId(building_id)

    def building(self, building_id: BuildingId) -> Building:
        return self.buildings[building_id]

    @cached_property
    def buildings(self) -> Mapping[BuildingId, Building]:
        """Buildings on the board, keyed by id, read back from the arrays."""
        cells: dict[BuildingId, set[Pos]] = defaultdict(set)
        for row, col in zip(*np.nonzero(self.building_ids != NO_BUILDING)):
            building_id = BuildingId(int(self.building_ids[row, col]))
            cells[building_id].add(Pos(int(row), int(col)))

        buildings = {}
        for building_id in sorted(cells):
            first = min(cells[building_id])
            code = int(self.owners[first.row, first.col])
            buildings[building_id] = Building(
                id=building_id,
                owner=None if code == NEUTRAL else PlayerId(code),
                cells=frozenset(cells[building_id]),
                kind=self.kinds.get(building_id),
            )
        return MappingProxyType(buildings)

    def validate(self) -> None:
        """Check that every building is a single connected piece of one occupancy.

        Raises:
            InconsistentBuilding: describing the first problem found.
        """
        bad_codes = self.owners < NEUTRAL
        if bad_codes.any():
            row, col = (int(i[0]) for i in np.nonzero(bad_codes))
            raise InconsistentBuilding(
                f"Unknown occupancy code {self.owners[row, col]} at ({row}, {col})"
            )

        occupied = self.owners != EMPTY
        covered = self.building_ids != NO_BUILDING
        mismatch = occupied != covered
        if mismatch.any():
            row, col = (int(i[0]) for i in np.nonzero(mismatch))
            if occupied[row, col]:
                raise InconsistentBuilding(f"Occupied cell ({row}, {col}) has no building")
            raise InconsistentBuilding(
                f"Empty cell ({row}, {col}) is marked as building {self.building_ids[row, col]}"
            )

        for building in self.buildings.values():
            codes = {int(self.owners[pos.row, pos.col]) for pos in building.cells}
            if len(codes) > 1:
                raise InconsistentBuilding(
                    f"Building {building.id} mixes occupancy codes {sorted(codes)}"
                )
            if not Region(building.cells).is_connected():
                raise InconsistentBuilding(f"Building {building.id} is not connected")
