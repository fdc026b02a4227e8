import pytest

from typetutor.core.models import CharStatus
from typetutor.services.typing_engine import InputDiffEngine, diff_feedback


def statuses(feedback):
    return [fb.status for fb in feedback]


@pytest.mark.parametrize("target,value", [
    ("cat", ""),
    ("cat", "c"),
    ("cat", "cb"),
    ("hello world", "hellp wo"),
    ("가나다", "가다"),
])
def test_feedback_positions(target, value):
    fb = diff_feedback(target, value)
    assert len(fb) == len(target)
    for i, item in enumerate(fb):
        assert item.char == target[i]
        assert item.index == i
        if i < len(value):
            expected = CharStatus.CORRECT if value[i] == target[i] else CharStatus.INCORRECT
        elif i == len(value):
            expected = CharStatus.CURRENT
        else:
            expected = CharStatus.PENDING
        assert item.status is expected


def test_backspace_forgets_previous_error():
    eng = InputDiffEngine("cat")
    eng.process_commit("cb")
    assert statuses(eng.feedback())[1] is CharStatus.INCORRECT
    res = eng.process_backspace("c")
    assert statuses(res.feedback) == [CharStatus.CORRECT, CharStatus.CURRENT, CharStatus.PENDING]
    assert not res.completed


def test_completion_counts_matching_positions():
    eng = InputDiffEngine("cat")
    res = eng.process_commit("cbt")
    assert res.completed
    assert res.correct_delta == 2
    assert res.total_delta == 3


def test_incomplete_commit_has_no_deltas():
    res = InputDiffEngine("cat").process_commit("ca")
    assert not res.completed
    assert res.correct_delta is None and res.total_delta is None


def test_overtyped_characters_are_ignored():
    res = InputDiffEngine("ab").process_commit("abxyz")
    assert res.completed
    assert (res.correct_delta, res.total_delta) == (2, 2)


def test_new_character_reported_only_for_single_append():
    eng = InputDiffEngine("cat")
    assert eng.process_commit("c").new_char_correct is True
    assert eng.process_commit("cx").new_char_correct is False
    assert eng.process_commit("c").new_char_correct is None   # shrank
    assert eng.process_commit("cat").new_char_correct is None  # grew by two


def test_empty_target_completes_immediately():
    res = InputDiffEngine("").process_commit("")
    assert res.completed
    assert (res.correct_delta, res.total_delta) == (0, 0)
    assert res.feedback == []
