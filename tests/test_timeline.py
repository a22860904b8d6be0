from conftest import data_row, parse, title_row

from weatherpanel.config import DEFAULT_CONFIG
from weatherpanel.core.layout import build_panel
from weatherpanel.core.timeline import ENTERING, EXITING, IDLE, PanelPresence, RowTransitions, TextSwap


def panel(*rows):
    return build_panel(parse(*rows), DEFAULT_CONFIG, 1920)


def test_first_set_appears_at_rest():
    rt = RowTransitions()
    assert not rt.update(panel(data_row("a")), 0)
    frame = rt.tick(0)
    assert frame.phase == IDLE
    assert frame.panel.fingerprint == ("a",)


def test_same_fingerprint_updates_in_place():
    fired = []
    rt = RowTransitions(on_exit_complete=lambda: fired.append(1))
    rt.update(panel(data_row("a", "1")), 0)
    assert not rt.update(panel(data_row("a", "2")), 50)
    frame = rt.tick(60)
    assert frame.phase == IDLE
    assert frame.panel.rows[0].groups[0].cells[1].cell.value == "2"
    assert fired == []


def test_new_fingerprint_exits_then_enters():
    fired = []
    rt = RowTransitions(on_exit_complete=lambda: fired.append(1))
    old = panel(data_row("a"), data_row("b"))
    rt.update(old, 0)
    assert rt.update(panel(data_row("c")), 1000)

    frame = rt.tick(1000 + old.exit_end_ms - 1)
    assert frame.phase == EXITING
    assert frame.panel is old
    assert fired == []

    frame = rt.tick(1000 + old.exit_end_ms)
    assert frame.phase == ENTERING
    assert frame.panel.fingerprint == ("c",)
    assert fired == [1]

    frame = rt.tick(5000)
    assert frame.phase == IDLE
    assert fired == [1]


def test_update_during_exit_retargets_without_second_exit():
    fired = []
    rt = RowTransitions(on_exit_complete=lambda: fired.append(1))
    rt.update(panel(data_row("a")), 0)
    rt.update(panel(data_row("b")), 100)
    rt.update(panel(data_row("c")), 150)
    assert rt.latest.fingerprint == ("c",)
    rt.tick(2000)
    assert fired == [1]
    assert rt.current.fingerprint == ("c",)
    assert rt.exits_completed == 1


def test_compares_against_latest_not_outgoing():
    rt = RowTransitions()
    rt.update(panel(data_row("a")), 0)
    rt.update(panel(data_row("b")), 100)
    # same as the pending set: no new transition, the exit keeps running
    rt.update(panel(data_row("b", "x")), 120)
    assert rt.phase == EXITING
    rt.tick(2000)
    assert rt.current.rows[0].groups[0].cells[1].cell.value == "x"


def test_exit_from_empty_set_completes_immediately():
    fired = []
    rt = RowTransitions(on_exit_complete=lambda: fired.append(1))
    rt.update(panel(), 0)
    assert rt.update(panel(data_row("a")), 10)
    assert fired == [1]
    assert rt.tick(10).phase == ENTERING


def test_height_tweens_to_latest():
    rt = RowTransitions()
    rt.update(panel(data_row("a"), data_row("b")), 0)
    assert rt.tick(0).panel_height == 180
    rt.update(panel(title_row(), data_row("a"), data_row("b")), 1000)
    mid = rt.tick(1300).panel_height
    assert 180 < mid < 250
    assert rt.tick(1600).panel_height == 250


def test_text_swap_waits_for_exit():
    swap = TextSwap("Today")
    swap.update("Tomorrow", 0)
    text, x, opacity = swap.at(200)
    assert text == "Today"
    assert x > 0 and opacity < 1
    text, x, opacity = swap.at(400 + 500)
    assert (text, x, opacity) == ("Tomorrow", 0.0, 1.0)


def test_panel_presence():
    p = PanelPresence()
    assert p.at(0) == (0.0, 0.0)
    p.set_visible(True, 0)
    y, o = p.at(0)
    assert (y, o) == (50, 0.0)
    assert p.at(500) == (0, 1.0)
    p.set_visible(False, 1000)
    assert p.at(1500) == (20, 0.0)
