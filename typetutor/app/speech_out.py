import logging

from PySide6.QtCore import QLocale, QObject, Signal
from PySide6.QtTextToSpeech import QTextToSpeech

from typetutor.app.errors import CapabilityUnavailable

logger = logging.getLogger(__name__)

_LOCALES = {"ko": "ko_KR", "en": "en_US"}


class SpeechSynth(QObject):
    """
    Plays dictation items through the system TTS engine.
    Connect speak/cancel to PracticeEngine.speakRequested/speechCancelRequested
    and playbackDone back into the engine as PlaybackDone events.
    """
    playbackDone = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._tts = None
        self._speaking = False
        if QTextToSpeech.availableEngines():
            self._tts = QTextToSpeech(self)
            self._tts.stateChanged.connect(self._on_state)
        else:
            logger.warning("No text-to-speech engine available")

    def ensure_available(self):
        if self._tts is None:
            raise CapabilityUnavailable("synthesis", "no text-to-speech engine installed")

    def speak(self, text: str, language: str, rate: float):
        if self._tts is None or not text:
            return
        # stopping the previous utterance must not count as its playback ending
        self._speaking = False
        self._tts.stop()
        self._tts.setLocale(QLocale(_LOCALES.get(language, "en_US")))
        # browser-style rate (1.0 = normal) onto Qt's -1..1 range
        self._tts.setRate(max(-1.0, min(1.0, rate - 1.0)))
        self._speaking = True
        self._tts.say(text)

    def cancel(self):
        if self._tts is None:
            return
        self._speaking = False
        self._tts.stop()

    def _on_state(self, state):
        if state == QTextToSpeech.State.Ready and self._speaking:
            self._speaking = False
            self.playbackDone.emit()
        elif state == QTextToSpeech.State.Error:
            self._speaking = False
            logger.warning("Speech synthesis error: %s", self._tts.errorString())
