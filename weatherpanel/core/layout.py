from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from weatherpanel.colors import Fill, RGBA, fill_for, is_transparent, text_color_for
from weatherpanel.config import OverlayConfig, resolve_row
from weatherpanel.core.corners import Corners, cell_corners
from weatherpanel.core.geometry import (
    PanelBox, RowBox, cell_spans, font_px, group_spans, panel_box, panel_height, row_boxes, visible_rows,
)
from weatherpanel.core.motion import MotionPlan, fingerprint, schedule_row
from weatherpanel.model import Cell, Group, Row

OVERLAY_SCALE = 1.1
TEXT_CELL_PADDING = 16    # 1rem each side
VALUE_CELL_PADDING = 8    # 0.5rem each side


@dataclass(frozen=True)
class Overlay:
    image: str
    opacity: float
    fit: str
    area: Tuple[float, float, float, float]   # x, y, w, h relative to the cell


@dataclass(frozen=True)
class CellLayout:
    cell: Cell
    x: float          # relative to the group
    width: float
    height: float
    fill: Fill
    text_color: RGBA
    corners: Corners
    font_px: float
    prefix_font_px: float
    padding_x: float
    bold: bool
    shadow: bool
    overlay: Optional[Overlay]

    @property
    def text_align(self) -> str:
        return self.cell.text_align


@dataclass(frozen=True)
class GroupLayout:
    x: float          # relative to the row
    width: float
    cells: Tuple[CellLayout, ...]
    entrance: MotionPlan
    exit: MotionPlan


@dataclass(frozen=True)
class RowLayout:
    row: Row
    index: int
    box: RowBox
    width: float
    groups: Tuple[GroupLayout, ...]

    @property
    def is_title(self) -> bool:
        return self.row.is_title


@dataclass(frozen=True)
class PanelLayout:
    rows: Tuple[RowLayout, ...]
    height: float                 # content height, see geometry.panel_height
    box: PanelBox
    fingerprint: Tuple[str, ...]
    show: bool

    @property
    def has_content(self) -> bool:
        return bool(self.rows)

    @property
    def entrance_end_ms(self) -> float:
        return max((g.entrance.end_ms for r in self.rows for g in r.groups), default=0)

    @property
    def exit_end_ms(self) -> float:
        return max((g.exit.end_ms for r in self.rows for g in r.groups), default=0)


def overlay_area(cell_w: float, cell_h: float) -> Tuple[float, float, float, float]:
    """Logos are drawn over a box 110% of the cell, centered."""
    w = cell_w * OVERLAY_SCALE
    h = cell_h * OVERLAY_SCALE
    return (cell_w - w) / 2, (cell_h - h) / 2, w, h


def overlay_size(image_w: float, image_h: float, area_w: float, area_h: float, fit: str) -> Tuple[float, float]:
    """Drawn size of an overlay image inside its area for a cellOverlayFit mode."""
    if image_w <= 0 or image_h <= 0:
        return 0.0, 0.0
    sx = area_w / image_w
    sy = area_h / image_h
    if fit == "width":
        s = sx
    elif fit == "height":
        s = sy
    elif fit == "cover":
        s = max(sx, sy)
    else:
        s = min(sx, sy)
    return image_w * s, image_h * s


def _cell_font(cell: Cell, row: Row, config: OverlayConfig) -> float:
    fonts = config.fonts
    if row.is_title:
        size = fonts.title_row_font_size if cell.is_text else fonts.title_row_value_font_size
    else:
        size = fonts.label_font_size if cell.is_text else fonts.value_font_size
    return font_px(size)


def layout_cells(cells: Sequence[Cell], group_width: float, height: float,
                 row: Row, config: OverlayConfig) -> Tuple[CellLayout, ...]:
    radius = config.styling.cell_border_radius
    spans = cell_spans(Group(cells=tuple(cells)), group_width)
    out = []
    for i, (cell, (x, w)) in enumerate(zip(cells, spans)):
        overlay = None
        if cell.overlay_image:
            overlay = Overlay(cell.overlay_image, cell.overlay_opacity, cell.overlay_fit, overlay_area(w, height))
        out.append(CellLayout(
            cell=cell,
            x=x,
            width=w,
            height=height,
            fill=fill_for(cell.color),
            text_color=text_color_for(cell.color),
            corners=cell_corners(i, cells, radius),
            font_px=_cell_font(cell, row, config),
            prefix_font_px=font_px(config.fonts.prefix_suffix_font_size),
            padding_x=TEXT_CELL_PADDING if cell.is_text else VALUE_CELL_PADDING,
            bold=row.is_title,
            shadow=not is_transparent(cell.color),
            overlay=overlay,
        ))
    return tuple(out)


def build_rows(rows: Sequence[Row], config: OverlayConfig, row_width: float) -> Tuple[RowLayout, ...]:
    rows = visible_rows(rows)
    boxes = row_boxes(rows, config)
    total = len(rows)
    out: List[RowLayout] = []
    for i, (row, box) in enumerate(zip(rows, boxes)):
        row_config = resolve_row(config, row.overrides)
        plans = schedule_row(row, i, total, config)
        groups = []
        for gi, (group, (gx, gw)) in enumerate(zip(row.groups, group_spans(row.groups, row_width))):
            groups.append(GroupLayout(
                x=gx,
                width=gw,
                cells=layout_cells(group.cells, gw, box.height, row, row_config),
                entrance=plans.entrance[gi],
                exit=plans.exit[gi],
            ))
        out.append(RowLayout(row=row, index=i, box=box, width=row_width, groups=tuple(groups)))
    return tuple(out)


def build_panel(rows: Sequence[Row], config: OverlayConfig, surface_w: float, show: bool = True) -> PanelLayout:
    """Everything the render surface needs for the panel and its rows."""
    shown = visible_rows(rows)
    height = panel_height(shown, config)
    box = panel_box(surface_w, height, config)
    layouts = build_rows(shown, config, box.inner[2])
    return PanelLayout(
        rows=layouts,
        height=height,
        box=box,
        fingerprint=fingerprint(shown),
        show=show,
    )


def describe(panel: PanelLayout) -> dict:
    """JSON-friendly view of a panel layout."""
    return {
        "show": panel.show,
        "height": panel.height,
        "box": {"x": panel.box.x, "y": panel.box.y, "width": panel.box.width,
                "height": panel.box.height, "padding": panel.box.padding},
        "fingerprint": list(panel.fingerprint),
        "rows": [
            {
                "index": r.index,
                "type": r.row.type,
                "top": r.box.top,
                "paddingTop": r.box.padding_top,
                "height": r.box.height,
                "paddingBottom": r.box.padding_bottom,
                "spacingAfter": r.box.spacing_after,
                "groups": [
                    {
                        "x": g.x,
                        "width": g.width,
                        "entrance": g.entrance.to_dict(),
                        "exit": g.exit.to_dict(),
                        "cells": [
                            {
                                "value": c.cell.value,
                                "x": c.x,
                                "width": c.width,
                                "color": c.cell.color,
                                "borderRadius": c.corners.css(),
                                "textAlign": c.text_align,
                                "fontPx": c.font_px,
                                "overlay": None if c.overlay is None else {
                                    "image": c.overlay.image,
                                    "opacity": c.overlay.opacity,
                                    "fit": c.overlay.fit,
                                    "area": list(c.overlay.area),
                                },
                            }
                            for c in g.cells
                        ],
                    }
                    for g in r.groups
                ],
            }
            for r in panel.rows
        ],
    }
