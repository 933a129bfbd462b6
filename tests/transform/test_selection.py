import pytest

from tabulator.services.transform import RowSelection, RowSelector


@pytest.fixture
def three_rows():
    return [
        ["title", "other title"],
        ["data", "other data"],
        ["nothing", "related", "with", "table"],
    ]


@pytest.fixture
def seven_rows():
    return [
        ["title", "other title"],
        ["data 1", "other data 1"],
        ["nothing", "related"],
        ["nothing", "related", "with", "table"],
        ["data 2", "other data 2"],
        ["still nothing", "nothing"],
        ["nothing"],
    ]


def test_defaults_take_first_row_as_header(three_rows):
    header, data = RowSelector().select(three_rows)
    assert header == ["title", "other title"]
    assert data == three_rows[1:]


def test_reject_single_index(three_rows):
    header, data = RowSelector().select(three_rows, RowSelection(reject=2))
    assert header == ["title", "other title"]
    assert data == [["data", "other data"]]


@pytest.mark.parametrize("tail", [range(-2, 0), slice(-2, None)])
def test_reject_is_sequential_on_shrinking_grid(seven_rows, tail):
    header, data = RowSelector().select(seven_rows, RowSelection(reject=[2, -1, tail]))
    assert header == ["title", "other title"]
    assert data == [["data 1", "other data 1"], ["nothing", "related", "with", "table"]]


def test_reject_predicate(seven_rows):
    header, data = RowSelector().select(
        seven_rows, RowSelection(reject=lambda row: "nothing" in row)
    )
    assert header == ["title", "other title"]
    assert data == [["data 1", "other data 1"], ["data 2", "other data 2"]]


def test_reject_predicate_and_index_interleaved(seven_rows):
    _, data = RowSelector().select(
        seven_rows, RowSelection(reject=[lambda row: "nothing" in row, -1])
    )
    assert data == [["data 1", "other data 1"]]


def test_out_of_range_rejections_are_ignored(three_rows):
    _, data = RowSelector().select(three_rows, RowSelection(reject=[10, -10]))
    assert data == three_rows[1:]


def test_empty_reject_is_noop(three_rows):
    assert RowSelector().select(three_rows, RowSelection(reject=[])) == RowSelector().select(three_rows)
    assert RowSelector().select(three_rows, RowSelection(reject=None)) == RowSelector().select(three_rows)


def test_header_and_skip(seven_rows):
    header, data = RowSelector().select(seven_rows, RowSelection(header=1))
    assert header == ["data 1", "other data 1"]
    assert data == seven_rows[2:]

    header, data = RowSelector().select(seven_rows, RowSelection(header=0, skip=4))
    assert header == ["title", "other title"]
    assert data == seven_rows[4:]


def test_out_of_bounds_header_and_skip(three_rows):
    header, data = RowSelector().select(three_rows, RowSelection(header=5))
    assert header == []
    assert data == []

    header, data = RowSelector().select(three_rows, RowSelection(skip=10))
    assert header == ["title", "other title"]
    assert data == []


def test_grid_is_not_mutated(seven_rows):
    snapshot = [list(row) for row in seven_rows]
    RowSelector().select(seven_rows, RowSelection(reject=[0, lambda row: True]))
    assert seven_rows == snapshot


def test_from_options():
    selection = RowSelection.from_options(skip=3, reject=[1])
    assert selection.header == 0
    assert selection.data_start == 3
    assert selection.reject_entries == [1]

    selection = RowSelection.from_options(header=2)
    assert selection.data_start == 3
    assert selection.reject_entries == []
