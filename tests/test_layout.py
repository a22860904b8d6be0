import pytest
from conftest import cell, data_row, parse, title_row

from weatherpanel.colors import COLOR_TABLE, DARK_INK, LIGHT_INK
from weatherpanel.config import DEFAULT_CONFIG
from weatherpanel.core.corners import Corners
from weatherpanel.core.layout import build_panel, describe, overlay_area, overlay_size


def test_build_panel_geometry():
    rows = parse(
        {"groups": [
            {"width": 40, "cells": [cell("Melbourne", type="text", width=60, gap=10), cell("21", width=40)]},
            {"width": 60, "cells": [cell("Rain", width=100, color="white")]},
        ]},
        {"groups": []},
        data_row("Sydney"),
    )
    panel = build_panel(rows, DEFAULT_CONFIG, 1000)
    assert panel.height == 180
    assert panel.fingerprint == ("Melbourne", "Sydney")
    assert len(panel.rows) == 2

    row = panel.rows[0]
    assert row.width == 500
    g0, g1 = row.groups
    assert (g0.x, g0.width) == (0, 200)
    assert (g1.x, g1.width) == (200, 300)
    a, b = g0.cells
    assert (a.x, a.width, a.height) == (0, 120, 80)
    assert (b.x, b.width) == (130, 80)
    assert a.corners == Corners.all(14)
    assert b.corners == Corners.all(14)
    assert a.padding_x == 16 and b.padding_x == 8
    assert g1.cells[0].text_color == DARK_INK
    assert a.text_color == LIGHT_INK
    assert panel.rows[1].box.top == 100


def test_unknown_color_uses_default_fill():
    panel = build_panel(parse(data_row("a")), DEFAULT_CONFIG, 1000)
    unknown = build_panel(parse({"groups": [{"width": 100, "cells": [cell("a", color="mauve")]}]}), DEFAULT_CONFIG, 1000)
    assert unknown.rows[0].groups[0].cells[0].fill == COLOR_TABLE["blue"]
    assert panel.rows[0].groups[0].cells[0].fill == COLOR_TABLE["blue"]


def test_fonts_follow_row_type_and_overrides():
    rows = parse(
        title_row("Today", titleRowFontSize="2rem"),
        {"groups": [{"width": 100, "cells": [cell("Hobart", type="text"), cell("12")]}], "valueFontSize": "30px"},
    )
    panel = build_panel(rows, DEFAULT_CONFIG, 1000)
    title_cell = panel.rows[0].groups[0].cells[0]
    label, value = panel.rows[1].groups[0].cells
    assert title_cell.font_px == pytest.approx(32)
    assert title_cell.bold
    assert label.font_px == pytest.approx(35.2)
    assert value.font_px == pytest.approx(30)
    assert value.prefix_font_px == pytest.approx(22.4)
    assert not value.bold


def test_transparent_cell_has_no_fill_or_shadow():
    rows = parse({"groups": [{"width": 100, "cells": [cell("a"), cell("", color="clear"), cell("b")]}]})
    a, gap, b = build_panel(rows, DEFAULT_CONFIG, 1000).rows[0].groups[0].cells
    assert gap.fill is None
    assert not gap.shadow
    assert a.shadow


def test_group_motion_plans_attached():
    panel = build_panel(parse(data_row("a"), data_row("b")), DEFAULT_CONFIG, 1000)
    assert [r.groups[0].entrance.delay_ms for r in panel.rows] == [0, 30]
    assert [r.groups[0].exit.delay_ms for r in panel.rows] == [30, 0]
    assert panel.exit_end_ms == 330
    assert panel.entrance_end_ms == 430


def test_empty_panel():
    panel = build_panel([], DEFAULT_CONFIG, 1000)
    assert panel.height == 0
    assert not panel.has_content
    assert panel.fingerprint == ()
    assert panel.exit_end_ms == 0


def test_overlay_area_and_fit():
    assert overlay_area(100, 50) == pytest.approx((-5, -2.5, 110, 55))
    assert overlay_size(200, 100, 110, 110, "contain") == pytest.approx((110, 55))
    assert overlay_size(200, 100, 110, 110, "cover") == pytest.approx((220, 110))
    assert overlay_size(200, 100, 110, 110, "width") == pytest.approx((110, 55))
    assert overlay_size(200, 100, 110, 110, "height") == pytest.approx((220, 110))
    assert overlay_size(0, 100, 110, 110, "contain") == (0.0, 0.0)


def test_overlay_descriptor():
    rows = parse({"groups": [{"width": 100, "cells": [
        cell("Storm", width=100, cellOverlayImage="storm.png", cellOverlayFit="height"),
    ]}]})
    c = build_panel(rows, DEFAULT_CONFIG, 1000).rows[0].groups[0].cells[0]
    assert c.overlay.image == "storm.png"
    assert c.overlay.opacity == 0.2
    assert c.overlay.fit == "height"
    assert c.overlay.area[2] == pytest.approx(550)


def test_describe_is_json_friendly():
    import json

    panel = build_panel(parse(title_row(), data_row("a", "b")), DEFAULT_CONFIG, 1920)
    data = json.loads(json.dumps(describe(panel)))
    assert data["height"] == 50 + 20 + 80
    assert data["rows"][0]["type"] == "title"
    assert data["rows"][1]["groups"][0]["cells"][0]["borderRadius"] == "14px 0 0 14px"
    assert data["rows"][1]["groups"][0]["entrance"]["durationMs"] == 400
