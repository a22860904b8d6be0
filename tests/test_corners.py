from conftest import cell

from weatherpanel.core.corners import NONE, Corners, cell_corners, group_corners
from weatherpanel.model import Cell

R = 14


def cells(*specs):
    return [Cell.from_dict(cell(str(i), **spec)) for i, spec in enumerate(specs)]


def test_lone_cell_rounds_all_corners():
    assert cell_corners(0, cells({}), R) == Corners.all(R)


def test_transparent_cell_is_square():
    row = cells({}, {"color": "clear"}, {})
    assert cell_corners(1, row, R) == NONE
    assert cell_corners(0, cells({"color": "clear"}, {}), R) == NONE


def test_touching_cells_form_one_pill():
    assert group_corners(cells({}, {}, {}), R) == [Corners.left(R), NONE, Corners.right(R)]


def test_gap_splits_pills():
    row = cells({"gap": 8}, {}, {})
    assert group_corners(row, R) == [Corners.all(R), Corners.left(R), Corners.right(R)]


def test_gap_on_last_cell_is_ignored_for_last():
    row = cells({}, {"gap": 8})
    assert group_corners(row, R) == [Corners.left(R), Corners.right(R)]


def test_transparent_neighbours_act_as_gaps():
    row = cells({}, {"color": "clear"}, {}, {"color": "clear"}, {})
    assert group_corners(row, R) == [Corners.all(R), NONE, Corners.all(R), NONE, Corners.all(R)]


def test_interior_cell_one_sided():
    row = cells({"gap": 4}, {}, {}, {})
    assert cell_corners(1, row, R) == Corners.left(R)
    row = cells({}, {"gap": 4}, {}, {})
    assert cell_corners(1, row, R) == Corners.right(R)
    assert cell_corners(2, row, R) == Corners.left(R)


def test_css_shorthand():
    assert Corners.all(14).css() == "14px"
    assert Corners.left(14).css() == "14px 0 0 14px"
    assert Corners.right(14).css() == "0 14px 14px 0"
    assert NONE.css() == "0"
