"""Errors raised by the capture engine."""

from __future__ import annotations

from core import Pos


class CaptureError(Exception):
    """Base class for errors raised while inspecting a board."""


class OutOfBounds(CaptureError, IndexError):
    """Raised when a cell outside the board is addressed."""

    def __init__(self, pos: Pos, height: int, width: int) -> None:
        super().__init__(
            f"({pos.row}, {pos.col}) is outside the {height}x{width} board"
        )
        self.pos = pos


class InconsistentBuilding(CaptureError, ValueError):
    """Raised when a board snapshot holds a corrupted building."""
