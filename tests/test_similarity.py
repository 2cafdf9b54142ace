import pytest

from responder.similarity import similarity


@pytest.mark.parametrize("text", ["hello", "how do i set a reminder", "ab", "x y z", "!!"])
def test_reflexive(text):
    assert similarity(text, text) == 1.0


def test_empty_strings():
    assert similarity("", "") == 1.0
    assert similarity("", "hello") == 0.0
    assert similarity("hello", "") == 0.0


def test_single_characters_score_zero_unless_identical():
    assert similarity("a", "b") == 0.0
    assert similarity("a", "ab") == 0.0
    assert similarity("a", "a") == 1.0


@pytest.mark.parametrize(
    "a,b",
    [
        ("night", "nacht"),
        ("how do i logout", "where can i sign out"),
        ("please set a reminder", "how do i set a reminder"),
        ("aaaa", "aa"),
    ],
)
def test_symmetric_and_bounded(a, b):
    forward = similarity(a, b)
    assert forward == similarity(b, a)
    assert 0.0 <= forward <= 1.0


def test_dice_coefficient_values():
    assert similarity("night", "nacht") == 0.25
    # Bigrams are counted as a multiset: {aa: 3} vs {aa: 1}.
    assert similarity("aaaa", "aa") == 0.5


def test_whitespace_is_ignored():
    assert similarity("set a reminder", "setareminder") == 1.0
    assert similarity("a", "a ") == 1.0
    assert similarity(" a", "b ") == 0.0


def test_blank_strings_count_as_empty():
    assert similarity(" ", "") == 1.0
    assert similarity("  ", "hello") == 0.0


def test_case_sensitive_on_inputs():
    assert similarity("Hello", "hello") < 1.0
