"""Detection of the regions a player captures with a placement.

After a piece is placed, every connected area of cells the mover does not own
is a candidate region. A region is enclosed when the mover's pieces and the
edge of the board close it off, and it is captured when it holds at most one
building. `resolve` is the entry point; the rest is exposed for inspection and
testing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

from connectivity import Component, Components, label_components
from core import BuildingId, PlayerId, Pos, Region
from errors import InconsistentBuilding
from grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureRules:
    """Tunable parts of the capture rule."""

    # Boundary-touching regions need at least this many wall contacts.
    min_wall_contacts: int = 2
    # Count only the wall contacts that border the region being classified,
    # instead of every wall contact the mover has on the board.
    per_region_contacts: bool = False
    # Run Grid.validate before classifying.
    validate: bool = True


# ===== Wall contacts =====


@dataclass(frozen=True)
class WallContacts:
    """The mover's pieces on the edge of the board, grouped into connected runs."""

    components: Components

    @property
    def clusters(self) -> tuple[Component, ...]:
        return self.components.members

    @property
    def count(self) -> int:
        return len(self.components)

    def cluster_of(self, pos: Pos) -> int | None:
        cluster = self.components.component_of(pos)
        return None if cluster is None else cluster.id


def find_wall_contacts(grid: Grid, mover: PlayerId) -> WallContacts:
    """Group the mover's boundary cells into 4-connected clusters.

    A run of boundary cells owned by the mover counts once, however many cells
    it spans and whether or not it turns a corner.
    """
    components = label_components(
        grid.height,
        grid.width,
        lambda pos: grid.is_owned_by(pos, mover) and grid.is_on_boundary(pos),
    )
    return WallContacts(components=components)


# ===== Verdicts =====


class Reason(Enum):
    OPEN_TO_BOUNDARY = "OPEN_TO_BOUNDARY"
    MULTIPLE_BUILDINGS = "MULTIPLE_BUILDINGS"


@dataclass(frozen=True)
class NotCaptured:
    region: Region
    reason: Reason


@dataclass(frozen=True)
class Captured:
    """An enclosed region the mover takes.

    `building` is the one building trapped in the region, or None when the
    region is empty territory.
    """

    region: Region
    empty_cells: frozenset[Pos]
    building: BuildingId | None = None


Verdict = NotCaptured | Captured


def touches_boundary(grid: Grid, region: Region) -> bool:
    return any(grid.is_on_boundary(pos) for pos in region.cells)


def adjacent_wall_contacts(
    grid: Grid, region: Region, contacts: WallContacts
) -> set[int]:
    """Clusters orthogonally adjacent to the region's own boundary cells."""
    edge = Region(frozenset(pos for pos in region.cells if grid.is_on_boundary(pos)))
    adjacent = set()
    for pos in edge.get_border():
        if not grid.in_bounds(pos):
            continue
        cluster = contacts.cluster_of(pos)
        if cluster is not None:
            adjacent.add(cluster)
    return adjacent


def classify_region(
    grid: Grid,
    region: Region,
    contacts: WallContacts,
    rules: CaptureRules = CaptureRules(),
) -> Verdict:
    """Decide whether the mover captures one candidate region."""
    if touches_boundary(grid, region):
        if rules.per_region_contacts:
            wall_contacts = len(adjacent_wall_contacts(grid, region, contacts))
        else:
            wall_contacts = contacts.count
        if wall_contacts < rules.min_wall_contacts:
            return NotCaptured(region, Reason.OPEN_TO_BOUNDARY)

    building_ids: list[BuildingId] = []
    empty_cells = set()
    for pos in region:
        building_id = grid.building_id_at(pos)
        if building_id is None:
            empty_cells.add(pos)
        elif building_id not in building_ids:
            building_ids.append(building_id)

    for building_id in building_ids:
        if not grid.building(building_id).cells <= region.cells:
            raise InconsistentBuilding(
                f"Building {building_id} straddles the edge of a region"
            )

    if len(building_ids) > 1:
        return NotCaptured(region, Reason.MULTIPLE_BUILDINGS)

    return Captured(
        region=region,
        empty_cells=frozenset(empty_cells),
        building=building_ids[0] if building_ids else None,
    )


def classify_regions(
    grid: Grid,
    mover: PlayerId,
    contacts: WallContacts | None = None,
    rules: CaptureRules = CaptureRules(),
) -> list[Verdict]:
    """One verdict per region of cells the mover does not own, in row-major order of first cell."""
    if contacts is None:
        contacts = find_wall_contacts(grid, mover)
    components = label_components(
        grid.height, grid.width, lambda pos: grid.is_capturable_for(pos, mover)
    )
    return [
        classify_region(grid, component.region, contacts, rules)
        for component in components
    ]


# ===== Resolution =====


@dataclass(frozen=True)
class CaptureResult:
    """Everything one placement captures. Falsy when nothing is captured."""

    verdicts: tuple[Verdict, ...] = ()

    @property
    def captured(self) -> tuple[Captured, ...]:
        return tuple(v for v in self.verdicts if isinstance(v, Captured))

    @property
    def cells(self) -> frozenset[Pos]:
        """Every cell of every captured region."""
        return frozenset(pos for v in self.captured for pos in v.region.cells)

    @property
    def empty_cells(self) -> frozenset[Pos]:
        return frozenset(pos for v in self.captured for pos in v.empty_cells)

    @property
    def buildings(self) -> frozenset[BuildingId]:
        return frozenset(v.building for v in self.captured if v.building is not None)

    def __bool__(self) -> bool:
        return bool(self.captured)


def resolve(
    grid: Grid, mover: PlayerId, rules: CaptureRules = CaptureRules()
) -> CaptureResult:
    """Work out what the mover captures on a board that already holds their latest piece.

    The grid is not modified; the caller applies the result.

    Raises:
        InconsistentBuilding: the snapshot holds a corrupted building.
    """
    if mover < 0:
        raise ValueError(f"Player ids are non-negative, got {mover}")
    if rules.validate:
        grid.validate()

    contacts = find_wall_contacts(grid, mover)
    verdicts = classify_regions(grid, mover, contacts, rules)
    logger.debug(
        "player %s: %d wall contact(s), %d candidate region(s)",
        mover,
        contacts.count,
        len(verdicts),
    )

    result = CaptureResult(verdicts=tuple(verdicts))
    for verdict in result.captured:
        logger.debug(
            "player %s captures %d cell(s) from (%d, %d), building %s",
            mover,
            len(verdict.region),
            min(verdict.region.cells).row,
            min(verdict.region.cells).col,
            verdict.building,
        )
    return result
