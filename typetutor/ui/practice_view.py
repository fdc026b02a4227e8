from __future__ import annotations

import html

from PySide6.QtCore import Qt, Slot
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QHBoxLayout, QSizePolicy

from typetutor.core import events as ev
from typetutor.core.config import DICTATION_DIFFICULTY, READ_ALOUD_DIFFICULTY
from typetutor.core.models import CharStatus, Navigation, SessionPhase, Snapshot
from typetutor.services.session import PracticeEngine


class PracticeView(QWidget):
    """
    Renders engine snapshots and feeds keyboard/IME input back as events.
    Holds no typing state of its own.
    """

    def __init__(self, engine: PracticeEngine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.setFocusPolicy(Qt.StrongFocus)
        self.setAttribute(Qt.WA_InputMethodEnabled, True)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 30, 0, 30)
        root.setSpacing(28)

        stats = QHBoxLayout()
        stats.setSpacing(40)
        self.lblTimer = QLabel("0.0 s", self)
        self.lblWPM = QLabel("0 WPM", self)
        self.lblAcc = QLabel("100 %", self)
        self.lblItem = QLabel("", self)
        for lab in (self.lblTimer, self.lblWPM, self.lblAcc, self.lblItem):
            lab.setAlignment(Qt.AlignCenter)
            stats.addWidget(lab)
        root.addLayout(stats)

        self.lblLine = QLabel("", self)
        self.lblLine.setTextFormat(Qt.RichText)
        self.lblLine.setWordWrap(True)
        self.lblLine.setAlignment(Qt.AlignCenter)
        self.lblLine.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.lblLine.setMinimumWidth(900)
        self.lblLine.setStyleSheet("font-size: 34px; line-height: 1.35;")
        root.addWidget(self.lblLine, stretch=1, alignment=Qt.AlignHCenter)

        self.lblStatus = QLabel("", self)
        self.lblStatus.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblStatus)

        self._colors = {
            "ok": "#22c55e",
            "err": "#ef4444",
            "mut": "#9aa1a9",
            "caret": "#eab308",
        }
        self._snapshot: Snapshot | None = None
        self._hint = True
        self._hint_item = None
        engine.snapshotChanged.connect(self.render)
        engine.capabilityUnavailable.connect(self._on_capability_lost)

    # ---------- rendering ----------
    @Slot(object)
    def render(self, snap: Snapshot):
        self._snapshot = snap
        m = snap.metrics
        if snap.remaining_ms is not None:
            self.lblTimer.setText(f"{snap.remaining_ms / 1000:0.0f} s left")
        else:
            self.lblTimer.setText(f"{m.elapsed_ms / 1000:0.1f} s")
        self.lblWPM.setText(f"{m.wpm} WPM")
        self.lblAcc.setText(f"{m.accuracy} %")
        self.lblItem.setText(f"{snap.item_index + 1} / {snap.pool_size}" if snap.pool_size else "")

        cfg = self.engine.config
        if cfg is not None and cfg.unit.speaks_items and (snap.item_index, snap.item) != self._hint_item:
            # each new dictation item starts with the difficulty's hint setting
            self._hint_item = (snap.item_index, snap.item)
            self._hint = DICTATION_DIFFICULTY[cfg.difficulty.value]["show_hint"]

        if snap.feedback:
            self.lblLine.setText(self._feedback_html(snap))
        elif snap.item is not None:
            if READ_ALOUD_DIFFICULTY[cfg.difficulty.value]["show_text"]:
                self.lblLine.setText(html.escape(snap.item.content))
            else:
                self.lblLine.setText("&#9679;" * len(snap.item.content.split()))
        else:
            self.lblLine.setText("")

        if snap.phase is SessionPhase.COMPLETE:
            self.lblStatus.setText(f"Done: {m.wpm} WPM, {m.accuracy} % accuracy. Ctrl+R to restart.")
        elif snap.phase is SessionPhase.PAUSED:
            self.lblStatus.setText("Paused (Esc to resume)")
        elif snap.speech_result is not None:
            r = snap.speech_result
            self.lblStatus.setText(f"{r.matched_tokens}/{r.target_tokens} words, {r.accuracy} %")
        elif snap.item_completed:
            self.lblStatus.setText("Press Enter for the next item")
        else:
            self.lblStatus.setText("")

    def _feedback_html(self, snap: Snapshot) -> str:
        colors = {
            CharStatus.CORRECT: self._colors["ok"],
            CharStatus.INCORRECT: self._colors["err"],
            CharStatus.CURRENT: self._colors["caret"],
            CharStatus.PENDING: self._colors["mut"],
        }
        masked = self.engine.config.unit.speaks_items and not self._hint
        parts = []
        for fb in snap.feedback:
            if masked and fb.status in (CharStatus.CURRENT, CharStatus.PENDING):
                ch = "&#9679;"
            else:
                ch = "&nbsp;" if fb.char == " " else html.escape(fb.char)
            style = f"color:{colors[fb.status]}"
            if fb.status is CharStatus.INCORRECT:
                style += f"; border-bottom:2px solid {self._colors['err']}"
            elif fb.status is CharStatus.CURRENT:
                style += "; text-decoration: underline"
            parts.append(f'<span style="{style}">{ch}</span>')
        if snap.composing:
            pending = snap.raw_input[len(self.engine.input.committed):]
            parts.append(f'<span style="color:{self._colors["caret"]}">{html.escape(pending)}</span>')
        return "".join(parts)

    @Slot(str)
    def _on_capability_lost(self, capability: str):
        self.lblStatus.setText(f"{capability} is not available on this system")

    # ---------- input ----------
    def keyPressEvent(self, e):
        mods = e.modifiers()
        key = e.key()
        if mods & Qt.ControlModifier and key == Qt.Key_R:
            self.engine.handle_event(ev.Restart())
            return
        if mods & Qt.ControlModifier and key == Qt.Key_H:
            self._hint = not self._hint
            if self._snapshot is not None:
                self.render(self._snapshot)
            return
        if mods & Qt.ControlModifier and key == Qt.Key_P:
            self.engine.handle_event(ev.Replay())
            return
        if mods & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
            return super().keyPressEvent(e)

        phase = self.engine.phase
        if key == Qt.Key_Escape:
            self.engine.handle_event(ev.Resume() if phase is SessionPhase.PAUSED else ev.Pause())
            return
        if key == Qt.Key_Backspace:
            self.engine.handle_event(ev.Backspace())
            return
        if key == Qt.Key_Tab:
            self.engine.handle_event(ev.Advance())
            return
        if key in (Qt.Key_Return, Qt.Key_Enter):
            nav = self.engine.config.unit.navigation if self.engine.config else None
            if nav is Navigation.BROWSE and self.engine.item_completed:
                self.engine.handle_event(ev.Next())
                return
            self._append("\n")
            return

        t = e.text()
        if t and t >= " ":
            self._append(t)
            return
        super().keyPressEvent(e)

    def inputMethodEvent(self, e):
        preedit = e.preeditString()
        commit = e.commitString()
        committed = self.engine.input.committed

        if commit:
            if self.engine.gate.composing:
                self.engine.handle_event(ev.CompositionEnd(committed + commit))
            else:
                self.engine.handle_event(ev.RawChange(committed + commit))
        elif not preedit and self.engine.gate.composing:
            # composition cancelled
            self.engine.handle_event(ev.CompositionEnd(committed))

        if preedit:
            # a commit may have moved on to the next item; read it again
            committed = self.engine.input.committed
            if not self.engine.gate.composing:
                self.engine.handle_event(ev.CompositionStart())
            self.engine.handle_event(ev.RawChange(committed + preedit))
        e.accept()

    def _append(self, text: str):
        self.engine.handle_event(ev.RawChange(self.engine.input.committed + text))
