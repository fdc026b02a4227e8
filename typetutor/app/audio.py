import logging

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


class AudioEngine:
    """Per-keystroke cues; connect on_keystroke to PracticeEngine.keystrokeJudged."""

    def __init__(self, ok_path: str = "", err_path: str = "", volume: float = 0.25):
        self.ok = QSoundEffect()
        self.err = QSoundEffect()
        self.enabled = True
        self.load(ok_path, err_path, volume)

    def load(self, ok_path: str, err_path: str, volume: float = 0.25):
        def load(effect, path):
            if path:
                effect.setSource(QUrl.fromLocalFile(path))
            effect.setVolume(volume)
        load(self.ok, ok_path)
        load(self.err, err_path)

    def play_ok(self):  self.enabled and self.ok.play()
    def play_err(self): self.enabled and self.err.play()

    def on_keystroke(self, correct: bool):
        self.play_ok() if correct else self.play_err()
