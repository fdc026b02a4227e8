import random

import pytest

from typetutor.main import HOME_ROW_KEYS, build_items, parse_args

TEXT = "First sentence here. Second sentence there!\n\nA new paragraph starts."


def test_home_row_drill_uses_row_keys():
    items = build_items("home-row", TEXT, rng=random.Random(3))
    assert len(items) == 1
    assert set(items[0].content) <= set(HOME_ROW_KEYS + " ")


def test_sentence_and_paragraph_pools():
    sentences = [i.content for i in build_items("sentences", TEXT)]
    assert sentences == ["First sentence here.", "Second sentence there!", "A new paragraph starts."]
    paragraphs = build_items("document", TEXT)
    assert len(paragraphs) == 2


def test_word_sets_are_built_from_text():
    items = build_items("words", "apple banana apple cherry")
    assert len(items) == 1
    assert sorted(items[0].content.lower().split()) == ["apple", "banana", "cherry"]


def test_parse_args_defaults_and_validation():
    args = parse_args([])
    assert args.mode == "sentences"
    assert args.text is None
    assert args.time is None
    args = parse_args(["notes.txt", "--mode", "listen-write", "--difficulty", "hard", "--time", "180"])
    assert (args.text, args.mode, args.difficulty, args.time) == ("notes.txt", "listen-write", "hard", 180)
    with pytest.raises(SystemExit):
        parse_args(["--time", "42"])
