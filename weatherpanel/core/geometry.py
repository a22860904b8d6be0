from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from weatherpanel.config import OverlayConfig
from weatherpanel.model import Group, Row

TITLE_ROW_HEIGHT = 50
REM_PX = 16.0

_SIZE_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(rem|em|px)?\s*$")


def row_height(row: Row, config: OverlayConfig) -> float:
    """Box height of a row, excluding title padding."""
    if row.data_row_height is not None:
        return row.data_row_height
    if row.is_title:
        return TITLE_ROW_HEIGHT
    return config.rows.data_row_height


def row_spacing(row: Row, next_row: Optional[Row], config: OverlayConfig) -> float:
    """Gap below `row`. Title rows carry their own padding, so any title neighbour means 0."""
    if next_row is None or row.is_title or next_row.is_title:
        return 0
    if row.data_row_spacing is not None:
        return row.data_row_spacing
    return config.rows.data_row_spacing


def title_row_padding(row: Row, index: int, total_rows: int, config: OverlayConfig) -> Tuple[float, float]:
    if not row.is_title:
        return 0, 0
    top = row.data_title_row_padding_top
    if top is None:
        top = config.rows.data_title_row_padding_top
    bottom = row.data_title_row_padding_bottom
    if bottom is None:
        bottom = config.rows.data_title_row_padding_bottom
    return (0 if index == 0 else top), (0 if index == total_rows - 1 else bottom)


@dataclass(frozen=True)
class RowBox:
    top: float           # y of the row's outer edge inside the panel content
    padding_top: float
    height: float
    padding_bottom: float
    spacing_after: float

    @property
    def box_top(self) -> float:
        return self.top + self.padding_top

    @property
    def extent(self) -> float:
        return self.padding_top + self.height + self.padding_bottom


def row_boxes(rows: Sequence[Row], config: OverlayConfig) -> List[RowBox]:
    """
    Vertical walk over the rows. Both panel_height and the renderer read
    this, so the animated panel height always equals the drawn content.
    """
    boxes: List[RowBox] = []
    y = 0.0
    total = len(rows)
    for i, row in enumerate(rows):
        pad_top, pad_bottom = title_row_padding(row, i, total, config)
        nxt = rows[i + 1] if i + 1 < total else None
        box = RowBox(
            top=y,
            padding_top=pad_top,
            height=row_height(row, config),
            padding_bottom=pad_bottom,
            spacing_after=row_spacing(row, nxt, config),
        )
        boxes.append(box)
        y += box.extent + box.spacing_after
    return boxes


def visible_rows(rows: Sequence[Row]) -> List[Row]:
    return [row for row in rows if row.groups]


def panel_height(rows: Sequence[Row], config: OverlayConfig) -> float:
    """Content height of the panel; rows without groups take no space."""
    boxes = row_boxes(visible_rows(rows), config)
    return sum(b.extent + b.spacing_after for b in boxes)


# ---------- horizontal ----------

def percent_of(total: float, pct: float) -> float:
    return total * pct / 100.0


@dataclass(frozen=True)
class PanelBox:
    x: float
    y: float
    width: float      # outer, includes padding on both sides
    height: float
    padding: float

    @property
    def inner(self) -> Tuple[float, float, float, float]:
        return (
            self.x + self.padding,
            self.y + self.padding,
            self.width - 2 * self.padding,
            self.height - 2 * self.padding,
        )


def panel_top(config: OverlayConfig) -> float:
    h = config.header
    return h.header_height + h.subheader_height + config.panel.header_panel_gap


def panel_box(surface_w: float, content_height: float, config: OverlayConfig) -> PanelBox:
    # Percent padding and margins resolve against the surface width.
    pad = percent_of(surface_w, config.panel.panel_padding)
    inner_w = percent_of(surface_w, config.panel.panel_width)
    return PanelBox(
        x=percent_of(surface_w, config.panel.screen_margin),
        y=panel_top(config),
        width=inner_w + 2 * pad,
        height=content_height + 2 * pad,
        padding=pad,
    )


def group_spans(groups: Sequence[Group], row_width: float) -> List[Tuple[float, float]]:
    """(x, width) of each group, laid out left to right with no normalization."""
    spans = []
    x = 0.0
    for group in groups:
        w = percent_of(row_width, group.width)
        spans.append((x, w))
        x += w
    return spans


def cell_spans(group: Group, group_width: float) -> List[Tuple[float, float]]:
    """(x, width) of each cell in a group; a gap spacer follows any cell but the last."""
    spans = []
    x = 0.0
    last = len(group.cells) - 1
    for i, cell in enumerate(group.cells):
        w = percent_of(group_width, cell.width)
        spans.append((x, w))
        x += w
        if cell.has_gap and i < last:
            x += cell.gap
    return spans


def font_px(size, default: float = REM_PX) -> float:
    """'2.2rem' -> 35.2, '24px' -> 24, 18 -> 18; anything else is 1rem."""
    if isinstance(size, bool):
        return default
    if isinstance(size, (int, float)):
        return float(size)
    if not isinstance(size, str):
        return default
    m = _SIZE_RE.match(size)
    if not m:
        return default
    value = float(m.group(1))
    unit = m.group(2) or "px"
    return value * REM_PX if unit in ("rem", "em") else value
