"""Configuration constants for the typing tutor."""

# Session timers
COUNTDOWN_INTERVAL_MS = 1000  # remaining-time decrement step
METRICS_TICK_MS = 500         # live WPM refresh

# Metrics
CHARS_PER_WORD = 5

# Time budgets offered to the user, in seconds
TIME_PRESETS_SEC = (60, 180, 300)

# Item-pool construction
DEFAULT_WORD_SET_SIZE = 10
MIN_WORD_LENGTH = 2
MIN_SENTENCE_LENGTH = 5
MAX_PARAGRAPH_LENGTH = 150
KOREAN_RATIO_THRESHOLD = 0.3  # share of Hangul letters that marks a text as Korean
ROW_DRILL_LENGTH = 40

# Dictation: how often an item is played, at what rate, and whether a hint is shown
DICTATION_DIFFICULTY = {
    "easy": {"repeats": 3, "rate": 0.8, "show_hint": True},
    "medium": {"repeats": 2, "rate": 1.0, "show_hint": False},
    "hard": {"repeats": 1, "rate": 1.2, "show_hint": False},
}

# Read-aloud: whether the target text stays visible while speaking
READ_ALOUD_DIFFICULTY = {
    "easy": {"show_text": True},
    "medium": {"show_text": True},
    "hard": {"show_text": False},
}

# Persistence
DB_PATH = "data/results.db"
