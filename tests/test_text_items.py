import random

from typetutor.core.models import Difficulty, PracticeItem
from typetutor.utils.text_items import (
    build_word_practice_sets, detect_language, extract_paragraphs,
    extract_sentences, extract_words, generate_row_drill, make_items,
)


def test_extract_words_unique_case_insensitive():
    assert extract_words("Hello hello, world! a 42 World") == ["Hello", "world", "42"]


def test_extract_words_korean():
    assert extract_words("사랑 행복, 사랑 나") == ["사랑", "행복"]


def test_word_sets():
    words = [f"w{i}" for i in range(12)]
    sets = build_word_practice_sets(words, set_size=5)
    assert sets == ["w0 w1 w2 w3 w4", "w5 w6 w7 w8 w9", "w10 w11"]
    assert build_word_practice_sets([]) == [""]


def test_extract_sentences():
    text = "Hi there. This is fine! Ok\nAnother line here"
    assert extract_sentences(text) == ["Hi there.", "This is fine!", "Another line here"]


def test_extract_paragraphs_chunks_long_ones():
    text = "Short para.\n\nThis is sentence one. This is sentence two.\n\n\n"
    assert extract_paragraphs(text, max_length=25) == [
        "Short para.",
        "This is sentence one.",
        "This is sentence two.",
    ]


def test_extract_paragraphs_without_sentence_breaks():
    chunks = extract_paragraphs("x" * 60, max_length=25)
    assert [len(c) for c in chunks] == [25, 25, 10]


def test_detect_language():
    assert detect_language("안녕하세요 hello") == "ko"
    assert detect_language("hello there 안") == "en"
    assert detect_language("123 !!") == "en"


def test_row_drill_uses_only_drill_keys():
    drill = generate_row_drill(["a", "s", " "], length=20, rng=random.Random(5))
    assert 0 < len(drill) <= 20
    assert set(drill) <= {"a", "s", " "}
    assert generate_row_drill([" "]) == ""


def test_make_items_detects_language():
    got = make_items(["hello", "안녕하세요"], difficulty=Difficulty.EASY)
    assert got == [
        PracticeItem("hello", "en", Difficulty.EASY),
        PracticeItem("안녕하세요", "ko", Difficulty.EASY),
    ]
    assert make_items(["x"], language="ko")[0].language == "ko"
