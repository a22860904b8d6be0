import pytest
from conftest import cell, data_row, parse, title_row

from weatherpanel.config import DEFAULT_CONFIG, resolve
from weatherpanel.core.geometry import (
    TITLE_ROW_HEIGHT, cell_spans, font_px, group_spans, panel_box, panel_height, row_boxes,
    row_height, row_spacing, title_row_padding,
)
from weatherpanel.model import Group


def test_row_height_precedence(config):
    explicit, title, data = parse(data_row("a", dataRowHeight=33), title_row(), data_row("b"))
    assert row_height(explicit, config) == 33
    assert row_height(title, config) == TITLE_ROW_HEIGHT
    assert row_height(data, config) == 80


def test_row_spacing_between_data_rows(config):
    a, b = parse(data_row("a"), data_row("b"))
    assert row_spacing(a, b, config) == 20
    a, b = parse(data_row("a", dataRowSpacing=7), data_row("b"))
    assert row_spacing(a, b, config) == 7


def test_row_spacing_zero_next_to_title(config):
    a, t, b = parse(data_row("a"), title_row(), data_row("b"))
    assert row_spacing(a, t, config) == 0
    assert row_spacing(t, b, config) == 0
    assert row_spacing(b, None, config) == 0


def test_title_padding_first_and_last(config):
    t = parse(title_row())[0]
    assert title_row_padding(t, 0, 3, config) == (0, 20)
    assert title_row_padding(t, 1, 3, config) == (60, 20)
    assert title_row_padding(t, 2, 3, config) == (60, 0)
    assert title_row_padding(t, 0, 1, config) == (0, 0)


def test_title_padding_row_override(config):
    t = parse(title_row(dataTitleRowPaddingTop=5, dataTitleRowPaddingBottom=6))[0]
    assert title_row_padding(t, 1, 3, config) == (5, 6)


def test_title_padding_only_for_title_rows(config):
    d = parse(data_row("a"))[0]
    assert title_row_padding(d, 1, 3, config) == (0, 0)


def test_panel_height_two_data_rows(config):
    assert panel_height(parse(data_row("a"), data_row("b")), config) == 180


def test_panel_height_with_leading_title(config):
    rows = parse(title_row(), data_row("a"), data_row("b"))
    # title: 0 top (first) + 50 + 20 bottom; then 80 + 20 + 80
    assert panel_height(rows, config) == 250
    rows = parse(title_row(dataTitleRowPaddingBottom=0), data_row("a"), data_row("b"))
    assert panel_height(rows, config) == 230


def test_panel_height_skips_rows_without_groups(config):
    rows = parse(data_row("a"), {"groups": []}, data_row("b"))
    assert panel_height(rows, config) == 180


def test_panel_height_empty(config):
    assert panel_height([], config) == 0


@pytest.mark.parametrize("rows", [
    [data_row("a")],
    [title_row(), data_row("a"), title_row("Later"), data_row("b", dataRowSpacing=3), data_row("c")],
    [data_row("a", dataRowHeight=40), title_row(dataRowHeight=70), title_row("x")],
])
def test_panel_height_equals_heights_plus_spacings(rows, config):
    parsed = parse(*rows)
    n = len(parsed)
    expected = 0
    for i, row in enumerate(parsed):
        top, bottom = title_row_padding(row, i, n, config)
        expected += top + row_height(row, config) + bottom
        if i < n - 1:
            expected += row_spacing(row, parsed[i + 1], config)
    assert panel_height(parsed, config) == expected


def test_row_boxes_positions(config):
    boxes = row_boxes(parse(data_row("a"), title_row(), data_row("b")), config)
    assert [b.top for b in boxes] == [0, 80, 80 + 60 + 50 + 20]
    assert boxes[1].box_top == 140


def test_panel_height_follows_config():
    cfg = resolve(DEFAULT_CONFIG, {"rows": {"dataRowHeight": 100, "dataRowSpacing": 10}})
    assert panel_height(parse(data_row("a"), data_row("b")), cfg) == 210


def test_group_and_cell_spans_pass_through():
    groups = (Group(width=60), Group(width=60))
    assert group_spans(groups, 1000) == [(0, 600), (600, 600)]

    g = Group.from_dict({"cells": [cell("a", width=30, gap=10), cell("b", width=70, gap=10)]})
    assert cell_spans(g, 200) == [(0, 60), (70, 140)]


def test_panel_box(config):
    box = panel_box(1920, 180, config)
    assert box.x == 192
    assert box.y == 110 + 40 + 80
    assert box.padding == pytest.approx(38.4)
    assert box.width == pytest.approx(960 + 2 * 38.4)
    assert box.inner[3] == pytest.approx(180)


@pytest.mark.parametrize("size, px", [
    ("2.2rem", 35.2),
    ("24px", 24.0),
    ("18", 18.0),
    (20, 20.0),
    ("huge", 16.0),
    (None, 16.0),
])
def test_font_px(size, px):
    assert font_px(size) == pytest.approx(px)
