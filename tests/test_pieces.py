"""Tests for piece shapes and rotation."""

import numpy as np
import pytest

from core import Pos
from pieces import (
    PieceKind,
    footprint,
    rotate,
    rotate_clockwise,
    rotate_counterclockwise,
    shape,
)


def layout(*rows: str) -> np.ndarray:
    return np.array([[ch == "#" for ch in row] for row in rows], dtype=bool)


def assert_layout(actual: np.ndarray, *rows: str) -> None:
    assert np.array_equal(actual, layout(*rows)), f"\n{actual.astype(int)}"


class TestShape:
    @pytest.mark.parametrize(
        "kind, size",
        [
            (PieceKind.TAVERN, 1),
            (PieceKind.STABLE, 2),
            (PieceKind.INN, 3),
            (PieceKind.BRIDGE, 3),
            (PieceKind.SQUARE, 4),
            (PieceKind.MANOR, 4),
            (PieceKind.ABBEY, 4),
            (PieceKind.ACADEMY, 5),
            (PieceKind.INFIRMARY, 5),
            (PieceKind.CASTLE, 5),
            (PieceKind.TOWER, 5),
            (PieceKind.CATHEDRAL, 6),
        ],
    )
    def test_piece_covers_expected_number_of_cells(
        self, kind: PieceKind, size: int
    ) -> None:
        assert int(shape(kind).sum()) == size

    def test_mirrored_abbey_is_reflected(self) -> None:
        assert_layout(shape(PieceKind.ABBEY), ".##", "##.")
        assert_layout(shape(PieceKind.ABBEY, mirrored=True), "##.", ".##")

    def test_mirrored_academy_is_reflected(self) -> None:
        assert_layout(shape(PieceKind.ACADEMY, mirrored=True), "#..", "###", ".#.")

    def test_mirroring_symmetric_piece_has_no_effect(self) -> None:
        assert_layout(shape(PieceKind.INN, mirrored=True), "##", "#.")

    def test_layouts_are_read_only(self) -> None:
        with pytest.raises(ValueError):
            shape(PieceKind.TAVERN)[0, 0] = False

    def test_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            shape("CHURCH")  # type: ignore[arg-type]


class TestRotateClockwise:
    def test_stable_alternates_between_vertical_and_horizontal(self) -> None:
        stable = rotate_clockwise(shape(PieceKind.STABLE))
        assert_layout(stable, "##")
        assert_layout(rotate_clockwise(stable), "#", "#")

    def test_inn_cycles_through_four_orientations(self) -> None:
        inn = shape(PieceKind.INN)
        inn = rotate_clockwise(inn)
        assert_layout(inn, "##", ".#")
        inn = rotate_clockwise(inn)
        assert_layout(inn, ".#", "##")
        inn = rotate_clockwise(inn)
        assert_layout(inn, "#.", "##")
        inn = rotate_clockwise(inn)
        assert_layout(inn, "##", "#.")

    def test_manor_cycles_through_four_orientations(self) -> None:
        manor = shape(PieceKind.MANOR)
        manor = rotate_clockwise(manor)
        assert_layout(manor, ".#", "##", ".#")
        manor = rotate_clockwise(manor)
        assert_layout(manor, ".#.", "###")
        manor = rotate_clockwise(manor)
        assert_layout(manor, "#.", "##", "#.")
        manor = rotate_clockwise(manor)
        assert_layout(manor, "###", ".#.")

    def test_cathedral_cycles_through_four_orientations(self) -> None:
        cathedral = shape(PieceKind.CATHEDRAL)
        cathedral = rotate_clockwise(cathedral)
        assert_layout(cathedral, "..#.", "####", "..#.")
        cathedral = rotate_clockwise(cathedral)
        assert_layout(cathedral, ".#.", ".#.", "###", ".#.")
        cathedral = rotate_clockwise(cathedral)
        assert_layout(cathedral, ".#..", "####", ".#..")
        cathedral = rotate_clockwise(cathedral)
        assert_layout(cathedral, ".#.", "###", ".#.", ".#.")


class TestRotateCounterclockwise:
    def test_inn_cycles_through_four_orientations(self) -> None:
        inn = shape(PieceKind.INN)
        inn = rotate_counterclockwise(inn)
        assert_layout(inn, "#.", "##")
        inn = rotate_counterclockwise(inn)
        assert_layout(inn, ".#", "##")
        inn = rotate_counterclockwise(inn)
        assert_layout(inn, "##", ".#")
        inn = rotate_counterclockwise(inn)
        assert_layout(inn, "##", "#.")

    def test_cathedral_first_turn(self) -> None:
        assert_layout(
            rotate_counterclockwise(shape(PieceKind.CATHEDRAL)),
            ".#..",
            "####",
            ".#..",
        )

    @pytest.mark.parametrize("kind", list(PieceKind))
    def test_undoes_clockwise_rotation(self, kind: PieceKind) -> None:
        original = shape(kind)
        assert np.array_equal(
            rotate_counterclockwise(rotate_clockwise(original)), original
        )


class TestRotate:
    def test_four_quarter_turns_is_identity(self) -> None:
        tower = shape(PieceKind.TOWER)
        assert np.array_equal(rotate(tower, 4), tower)

    def test_negative_turns_go_counterclockwise(self) -> None:
        castle = shape(PieceKind.CASTLE)
        assert np.array_equal(rotate(castle, -1), rotate_counterclockwise(castle))

    def test_rejects_non_integer_turns(self) -> None:
        with pytest.raises(ValueError):
            rotate(shape(PieceKind.TAVERN), 1.5)  # type: ignore[arg-type]


class TestFootprint:
    def test_offsets_layout_by_origin(self) -> None:
        assert footprint(shape(PieceKind.INN), Pos(3, 4)) == {
            Pos(3, 4),
            Pos(3, 5),
            Pos(4, 4),
        }

    def test_skips_holes_in_layout(self) -> None:
        cells = footprint(shape(PieceKind.CASTLE), Pos(0, 0))
        assert Pos(1, 1) not in cells
        assert len(cells) == 5
