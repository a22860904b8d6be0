from conftest import cell, data_row, payload, title_row

from weatherpanel.model import Cell, Payload, Row


def test_cell_defaults():
    c = Cell.from_dict({"value": 21})
    assert c.value == "21"
    assert c.text_align == "center"
    assert c.gap == 0
    assert c.overlay_opacity == 0.2
    assert c.overlay_fit == "contain"
    assert c.type == "value"


def test_cell_invalid_fields_fall_back():
    c = Cell.from_dict({"textAlign": "justify", "cellOverlayFit": "stretch", "gap": "wide", "color": 7})
    assert c.text_align == "center"
    assert c.overlay_fit == "contain"
    assert c.gap == 0
    assert c.color == "blue"


def test_non_mapping_inputs_never_raise():
    assert Cell.from_dict("x") == Cell()
    assert Row.from_dict(None).groups == ()
    assert Row.from_dict({"groups": "nope"}).groups == ()


def test_row_keeps_inline_overrides():
    row = Row.from_dict(title_row("Today", titleRowFontSize="2rem", dataRowHeight=60, entranceAnimation={"direction": "top"}))
    assert row.is_title
    assert row.data_row_height == 60
    assert row.overrides == {"titleRowFontSize": "2rem", "dataRowHeight": 60}
    assert row.entrance_animation == {"direction": "top"}


def test_row_first_value():
    assert Row.from_dict(data_row("Melbourne", "21")).first_value == "Melbourne"
    assert Row.from_dict({"groups": [{"cells": []}]}).first_value == ""


def test_missing_payload_is_hidden_state():
    hidden = Payload.from_dict(None)
    assert not hidden.present
    assert not hidden.panel_visible
    empty = Payload.from_dict({})
    assert empty.present
    assert not empty.panel_visible


def test_payload_visible_rows_drop_rows_without_groups():
    p = Payload.from_dict(payload(data_row("A"), {"groups": []}, {"type": "title"}, data_row("B")))
    assert [r.first_value for r in p.visible_rows] == ["A", "B"]
    assert p.panel_visible


def test_show_panel_false_hides_panel():
    p = Payload.from_dict(payload(data_row("A"), showPanel=False))
    assert p.present
    assert not p.panel_visible


def test_overlay_fields():
    c = Cell.from_dict(cell("Storm", cellOverlayImage="logos/storm.png", cellOverlayOpacity=0.5, cellOverlayFit="cover"))
    assert c.overlay_image == "logos/storm.png"
    assert c.overlay_opacity == 0.5
    assert c.overlay_fit == "cover"


def test_empty_weather_data_is_present_not_hidden():
    p = Payload.from_dict({"weatherData": {}})
    assert p.has_weather_data
    assert p.panel_visible
    assert p.rows == ()
