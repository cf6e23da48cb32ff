"""Piece shapes and rotations."""

from __future__ import annotations
from enum import Enum

import numpy as np

from core import Pos


class PieceKind(Enum):
    TAVERN = "TAVERN"
    STABLE = "STABLE"
    INN = "INN"
    BRIDGE = "BRIDGE"
    SQUARE = "SQUARE"
    MANOR = "MANOR"
    ABBEY = "ABBEY"
    ACADEMY = "ACADEMY"
    INFIRMARY = "INFIRMARY"
    CASTLE = "CASTLE"
    TOWER = "TOWER"
    CATHEDRAL = "CATHEDRAL"


def _layout(*rows: str) -> np.ndarray:
    layout = np.array([[ch == "#" for ch in row] for row in rows], dtype=bool)
    layout.flags.writeable = False
    return layout


# Layouts in their unrotated orientation, "#" marks an occupied cell.
SHAPES: dict[PieceKind, np.ndarray] = {
    PieceKind.TAVERN: _layout("#"),
    PieceKind.STABLE: _layout("#", "#"),
    PieceKind.INN: _layout("##", "#."),
    PieceKind.BRIDGE: _layout("#", "#", "#"),
    PieceKind.SQUARE: _layout("##", "##"),
    PieceKind.MANOR: _layout("###", ".#."),
    PieceKind.ABBEY: _layout(".##", "##."),
    PieceKind.ACADEMY: _layout("..#", "###", ".#."),
    PieceKind.INFIRMARY: _layout(".#.", "###", ".#."),
    PieceKind.CASTLE: _layout("###", "#.#"),
    PieceKind.TOWER: _layout(".##", "##.", "#.."),
    PieceKind.CATHEDRAL: _layout(".#.", "###", ".#.", ".#."),
}

# The second player's Abbey and Academy are mirror images of the first's.
CHIRAL_KINDS = frozenset({PieceKind.ABBEY, PieceKind.ACADEMY})


def shape(kind: PieceKind, mirrored: bool = False) -> np.ndarray:
    """Return the layout of a piece kind.

    Args:
        kind: The piece kind.
        mirrored: Use the mirror-image layout. Only meaningful for chiral kinds.

    Returns:
        A read-only boolean array, True where the piece covers a cell.
    """
    if not isinstance(kind, PieceKind):
        raise ValueError(f"Unknown piece kind: {kind!r}")
    layout = SHAPES[kind]
    if mirrored and kind in CHIRAL_KINDS:
        return _freeze(layout[:, ::-1])
    return layout


def rotate_clockwise(layout: np.ndarray) -> np.ndarray:
    return _freeze(np.rot90(layout, k=-1))


def rotate_counterclockwise(layout: np.ndarray) -> np.ndarray:
    return _freeze(np.rot90(layout, k=1))


def rotate(layout: np.ndarray, quarter_turns: int) -> np.ndarray:
    """Rotate clockwise by a number of quarter turns (negative turns go counterclockwise)."""
    if not isinstance(quarter_turns, int):
        raise ValueError(f"Quarter turns must be an int, got {quarter_turns!r}")
    return _freeze(np.rot90(layout, k=-(quarter_turns % 4)))


def footprint(layout: np.ndarray, origin: Pos) -> frozenset[Pos]:
    """Cells covered by a layout whose top-left corner sits at origin."""
    return frozenset(
        origin + Pos(int(i), int(j)) for i, j in zip(*np.nonzero(layout))
    )


def _freeze(layout: np.ndarray) -> np.ndarray:
    layout = np.ascontiguousarray(layout)
    layout.flags.writeable = False
    return layout
