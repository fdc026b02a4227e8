# main.py
from __future__ import annotations
import argparse
import sys
import logging
import random
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMainWindow, QMessageBox

from typetutor.app.audio import AudioEngine
from typetutor.app.errors import CapabilityUnavailable, DatabaseError
from typetutor.app.speech_out import SpeechSynth
from typetutor.core import events as ev
from typetutor.core.config import TIME_PRESETS_SEC
from typetutor.core.models import PRACTICE_UNITS, Difficulty, SessionConfig
from typetutor.services.session import PracticeEngine
from typetutor.ui.practice_view import PracticeView
from typetutor.utils.db_helper import ResultRecorder, recent_results
from typetutor.utils.text_items import (
    build_word_practice_sets, extract_paragraphs, extract_sentences, extract_words,
    generate_row_drill, make_items,
)

_FALLBACK = (
    "Welcome to Typetutor. Type each sentence exactly as shown. "
    "Correct keystrokes turn green and mistakes turn red. "
    "Press Escape to pause and Control R to start over."
)


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("app.log", encoding="utf-8"),
        ],
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        if QApplication.instance() is not None:
            QMessageBox.critical(None, "Application Error", f"{exctype.__name__}: {value}")
        sys.exit(1)

    sys.excepthook = excepthook


def load_text(path: str | None) -> str:
    if path:
        p = Path(path)
        if p.exists():
            return p.read_text(encoding="utf-8").replace("\r\n", "\n")
        logging.warning("Text file not found: %s", path)
    return _FALLBACK


HOME_ROW_KEYS = "asdfghjkl;"


def build_items(mode: str, text: str, rng: random.Random | None = None):
    """Turn source text into the practice pool for a mode."""
    if mode == "home-row":
        return make_items([generate_row_drill(HOME_ROW_KEYS, rng=rng)], language="en")
    if mode == "words":
        return make_items(s for s in build_word_practice_sets(extract_words(text)) if s)
    if mode in ("document", "summary"):
        return make_items(extract_paragraphs(text))
    return make_items(extract_sentences(text))


def parse_args(argv: list[str]):
    parser = argparse.ArgumentParser(prog="typetutor", description="Typing practice tutor")
    parser.add_argument("text", nargs="?", help="UTF-8 text file to practise on")
    parser.add_argument("--mode", choices=sorted(PRACTICE_UNITS), default="sentences")
    parser.add_argument("--time", type=int, choices=TIME_PRESETS_SEC, default=None,
                        help="time limit in seconds")
    parser.add_argument("--items", type=int, default=None, help="stop after this many items")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default="easy")
    parser.add_argument("--no-shuffle", action="store_true")
    return parser.parse_args(argv)


def log_recent_results():
    try:
        results = recent_results(5)
    except DatabaseError:
        logging.exception("Could not read previous results")
        return
    for r in results:
        logging.info("previous %s session: %d WPM, %d%% accuracy", r.practice_type, r.wpm, r.accuracy)


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = parse_args(sys.argv[1:] if argv is None else argv)
    log_recent_results()

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Typetutor")
    app.setOrganizationName("Typetutor")

    engine = PracticeEngine()
    view = PracticeView(engine)

    audio = AudioEngine()
    engine.keystrokeJudged.connect(audio.on_keystroke)

    synth = SpeechSynth(engine)
    engine.speakRequested.connect(synth.speak)
    engine.speechCancelRequested.connect(synth.cancel)
    synth.playbackDone.connect(lambda: engine.handle_event(ev.PlaybackDone()))

    recorder = ResultRecorder()
    engine.finished.connect(recorder.record)

    text = load_text(args.text)
    items = build_items(args.mode, text) or build_items(args.mode, _FALLBACK)
    time_limit = args.time * 1000 if args.time else None
    if time_limit is None and args.items is None and args.mode in ("words", "sentences"):
        time_limit = TIME_PRESETS_SEC[0] * 1000
    engine.load(items, SessionConfig.for_mode(
        args.mode,
        time_limit_ms=time_limit,
        item_limit=args.items,
        shuffle=not args.no_shuffle,
        difficulty=Difficulty(args.difficulty),
    ))
    try:
        synth.ensure_available()
    except CapabilityUnavailable as e:
        engine.handle_event(ev.CapabilityLost(e.capability, e.reason))
    # no desktop speech recognizer is wired in; read-aloud shows text only
    engine.handle_event(ev.CapabilityLost("recognition", "no recognizer configured"))

    win = QMainWindow()
    win.setWindowTitle("Typetutor")
    win.resize(1200, 720)
    win.setCentralWidget(view)
    win.show()
    view.setFocus()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
