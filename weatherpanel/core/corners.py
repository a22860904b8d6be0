from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence

from weatherpanel.colors import is_transparent
from weatherpanel.model import Cell


@dataclass(frozen=True)
class Corners:
    top_left: float = 0
    top_right: float = 0
    bottom_right: float = 0
    bottom_left: float = 0

    @classmethod
    def all(cls, r: float) -> "Corners":
        return cls(r, r, r, r)

    @classmethod
    def left(cls, r: float) -> "Corners":
        return cls(r, 0, 0, r)

    @classmethod
    def right(cls, r: float) -> "Corners":
        return cls(0, r, r, 0)

    @property
    def is_square(self) -> bool:
        return not any(self.as_tuple())

    def as_tuple(self):
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def css(self) -> str:
        """Border-radius shorthand, e.g. '14px 0 0 14px'."""
        values = self.as_tuple()
        if len(set(values)) == 1:
            return f"{_px(values[0])}"
        return " ".join(_px(v) for v in values)


def _px(v: float) -> str:
    if not v:
        return "0"
    return f"{v:g}px"


NONE = Corners()


def cell_corners(index: int, cells: Sequence[Cell], radius: float) -> Corners:
    """
    Which corners of cells[index] are rounded. Cells that touch read as one
    pill; a trailing gap or a transparent neighbour starts a new one.
    """
    total = len(cells)
    if total == 1:
        return Corners.all(radius)

    cell = cells[index]
    if is_transparent(cell.color):
        return NONE

    prev_cell = cells[index - 1] if index > 0 else None
    next_cell = cells[index + 1] if index < total - 1 else None

    gap_before = prev_cell is not None and (prev_cell.has_gap or is_transparent(prev_cell.color))
    gap_after = next_cell is not None and (cell.has_gap or is_transparent(next_cell.color))

    if index == 0:
        return Corners.all(radius) if gap_after else Corners.left(radius)
    if index == total - 1:
        return Corners.all(radius) if gap_before else Corners.right(radius)
    if gap_before and gap_after:
        return Corners.all(radius)
    if gap_before:
        return Corners.left(radius)
    if gap_after:
        return Corners.right(radius)
    return NONE


def group_corners(cells: Sequence[Cell], radius: float) -> List[Corners]:
    return [cell_corners(i, cells, radius) for i in range(len(cells))]
