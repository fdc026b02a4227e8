"""Turns raw document text into practice items."""

from __future__ import annotations

import random
import re
from typing import Iterable, List, Optional

from typetutor.core.config import (
    DEFAULT_WORD_SET_SIZE, KOREAN_RATIO_THRESHOLD, MAX_PARAGRAPH_LENGTH,
    MIN_SENTENCE_LENGTH, MIN_WORD_LENGTH, ROW_DRILL_LENGTH,
)
from typetutor.core.models import Difficulty, PracticeItem

_WORD_RE = re.compile(r"[^\W_]+")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?。])\s+|\n+")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?。])\s+")
_HANGUL_RE = re.compile(r"[\uac00-\ud7af\u1100-\u11ff\u3130-\u318f]")


def extract_words(content: str) -> List[str]:
    """Unique words (case-insensitive), in order of first appearance."""
    seen = set()
    out = []
    for word in _WORD_RE.findall(content or ""):
        key = word.lower()
        if key not in seen and len(word) >= MIN_WORD_LENGTH:
            seen.add(key)
            out.append(word)
    return out


def build_word_practice_sets(words: List[str], set_size: int = DEFAULT_WORD_SET_SIZE) -> List[str]:
    sets = [" ".join(words[i:i + set_size]) for i in range(0, len(words), set_size)]
    return sets or [""]


def extract_sentences(content: str) -> List[str]:
    raw = _SENTENCE_SPLIT_RE.split(content or "")
    return [s.strip() for s in raw if len(s.strip()) >= MIN_SENTENCE_LENGTH]


def extract_paragraphs(content: str, max_length: int = MAX_PARAGRAPH_LENGTH) -> List[str]:
    """
    Paragraphs split on blank lines. Paragraphs longer than max_length are
    chunked at sentence boundaries; if a single sentence is still too long
    it is cut into fixed-size pieces.
    """
    out: List[str] = []
    for para in re.split(r"\n\n+", content or ""):
        para = para.strip()
        if not para:
            continue
        if len(para) <= max_length:
            out.append(para)
            continue

        chunks: List[str] = []
        current = ""
        for sentence in _SENTENCE_END_RE.split(para):
            if current and len(current) + len(sentence) > max_length:
                chunks.append(current.strip())
                current = sentence
            else:
                current = f"{current} {sentence}" if current else sentence
        if current.strip():
            chunks.append(current.strip())

        for chunk in chunks:
            if len(chunk) <= max_length:
                out.append(chunk)
            else:
                out.extend(chunk[i:i + max_length] for i in range(0, len(chunk), max_length))
    return [p for p in out if p]


def detect_language(content: str) -> str:
    hangul = len(_HANGUL_RE.findall(content or ""))
    letters = sum(1 for ch in (content or "") if ch.isalpha())
    return "ko" if letters and hangul / letters > KOREAN_RATIO_THRESHOLD else "en"


def generate_row_drill(keys: Iterable[str], length: int = ROW_DRILL_LENGTH,
                       rng: Optional[random.Random] = None) -> str:
    """Random groups of 2-5 drill keys separated by spaces, about `length` long."""
    rng = rng or random.Random()
    keys = [k for k in keys if k.strip()]
    if not keys:
        return ""
    groups = []
    total = 0
    while total < length:
        group = "".join(rng.choice(keys) for _ in range(rng.randint(2, 5)))
        groups.append(group)
        total += len(group) + 1
    return " ".join(groups)[:length].rstrip()


def make_items(texts: Iterable[str], language: Optional[str] = None,
               difficulty: Optional[Difficulty] = None) -> List[PracticeItem]:
    return [
        PracticeItem(t, language or detect_language(t), difficulty)
        for t in texts
    ]
