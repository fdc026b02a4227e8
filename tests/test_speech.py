from typetutor.services.speech import SpeechScorer, tokenize


def test_positional_token_accuracy():
    r = SpeechScorer().score("I am find today", "I am fine today")
    assert r.target_tokens == 4
    assert r.matched_tokens == 3
    assert r.accuracy == 75


def test_word_in_wrong_position_is_a_miss():
    r = SpeechScorer().score("am I fine today", "I am fine today")
    assert r.matched_tokens == 2
    assert r.accuracy == 50


def test_case_and_spacing_are_ignored():
    r = SpeechScorer().score("  hello   WORLD ", "Hello world")
    assert r.accuracy == 100


def test_extra_spoken_words_do_not_count_against():
    assert SpeechScorer().score("good morning to you all", "good morning").accuracy == 100


def test_short_transcript():
    assert SpeechScorer().score("good", "good morning everyone").accuracy == 33


def test_empty_target_scores_zero():
    r = SpeechScorer().score("anything", "   ")
    assert r.target_tokens == 0
    assert r.accuracy == 0


def test_tokenize():
    assert tokenize(" A  b\tc\n") == ["a", "b", "c"]
    assert tokenize("") == []
