"""Per-item inline edit state machine."""
import pytest

from app.crm.edit_state import EditBoard, Editing, Error, InvalidTransition, Saving, Viewing
from app.crm.errors import InvalidArgument
from app.crm.modules.custom_sizes.utils import Triple

KEY = (1, 10)
CURRENT = {"chest": 38, "waist": 32, "hips": 40}


def test_unknown_item_is_viewing():
    assert EditBoard().state(KEY) == Viewing()


def test_edit_save_success_cycle():
    board = EditBoard()
    board.begin_edit(KEY, CURRENT)
    board.update_draft(KEY, chest=40)
    assert board.state(KEY) == Editing({"chest": 40, "waist": 32, "hips": 40})

    assert board.submit(KEY) == Saving(Triple(40.0, 32.0, 40.0))
    board.succeed(KEY)
    assert board.state(KEY) == Viewing()
    assert board.editing_keys() == []


def test_failed_save_keeps_draft_for_retry():
    board = EditBoard()
    board.begin_edit(KEY, CURRENT)
    board.update_draft(KEY, waist=33)
    board.submit(KEY)
    err = board.fail(KEY, "Failed to update custom size")
    assert isinstance(err, Error)
    assert err.message == "Failed to update custom size"

    retry = board.begin_edit(KEY, {"chest": 1, "waist": 1, "hips": 1})
    assert retry.draft == {"chest": 38.0, "waist": 33.0, "hips": 40.0}


def test_invalid_draft_stays_editing():
    board = EditBoard()
    board.begin_edit(KEY, CURRENT)
    board.update_draft(KEY, hips=0)
    with pytest.raises(InvalidArgument):
        board.submit(KEY)
    assert isinstance(board.state(KEY), Editing)


def test_items_are_independent():
    board = EditBoard()
    other = (1, 11)
    board.begin_edit(KEY, CURRENT)
    assert board.state(other) == Viewing()
    board.begin_edit(other, CURRENT)
    board.cancel(KEY)
    assert board.editing_keys() == [other]


@pytest.mark.parametrize(
    "action",
    [
        lambda b: b.submit(KEY),
        lambda b: b.succeed(KEY),
        lambda b: b.fail(KEY, "x"),
        lambda b: b.cancel(KEY),
        lambda b: b.update_draft(KEY, chest=1),
    ],
)
def test_illegal_transitions_from_viewing(action):
    with pytest.raises(InvalidTransition):
        action(EditBoard())


def test_cannot_edit_while_saving():
    board = EditBoard()
    board.begin_edit(KEY, CURRENT)
    board.submit(KEY)
    with pytest.raises(InvalidTransition):
        board.begin_edit(KEY, CURRENT)
    with pytest.raises(InvalidTransition):
        board.cancel(KEY)
