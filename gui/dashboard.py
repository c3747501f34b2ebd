"""Desktop dashboard: price inputs on the left, report on the right."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6.QtCore import Qt, QThread
from PySide6.QtGui import QFont, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.signals import signals
from engine.models import Mode
from engine.overrides import UnknownField
from gui.threads import FetchWorker
from services.cache_store import CacheStatus
from services.session import AppSession
from utils.gp import InvalidFormat
from utils.report_text import render_report, status_line

# field path edited by each input, in display order
INPUT_FIELDS = ("shale.avg", "shard.avg", "armor1.avg", "armor2.avg", "armor3.avg")


class DashboardWidget(QWidget):
    """Oathplate profit dashboard bound to an :class:`AppSession`."""

    def __init__(self, session: AppSession, fetcher, version: str = "1.0.0", parent=None):
        super().__init__(parent)
        self.session = session
        self.fetcher = fetcher
        self.version = version
        self.logger = logging.getLogger(__name__)
        self.fetch_running = False
        self._thread: Optional[QThread] = None
        self._worker: Optional[FetchWorker] = None
        self.inputs: Dict[str, QLineEdit] = {}

        self._build_ui()
        signals.report_ready.connect(self.on_report_ready)
        self.refresh()

    # ------------------------------------------------------------------
    # UI helpers
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        self.setWindowTitle("Oathplate Calculator")
        root = QVBoxLayout(self)

        self.lblHeader = QLabel()
        self.lblHeader.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblHeader)

        body = QHBoxLayout()
        inputs_box = QGroupBox("Inputs")
        left = QVBoxLayout(inputs_box)
        left.addWidget(QLabel("Enter: apply field | F/L/S/Q: fetch/load/save/quit"))

        form = QFormLayout()
        labels = self._input_labels()
        for field, label in zip(INPUT_FIELDS, labels):
            edit = QLineEdit()
            edit.returnPressed.connect(lambda f=field: self.apply(f, self.inputs[f].text()))
            self.inputs[field] = edit
            form.addRow(f"{label} avg:", edit)
        left.addLayout(form)
        left.addSpacing(8)

        self.btnFetch = QPushButton("Fetch (F)")
        self.btnLoad = QPushButton("Load (L)")
        self.btnSave = QPushButton("Save (S)")
        self.btnQuit = QPushButton("Quit (Q)")
        self.btnFetch.clicked.connect(self.do_fetch)
        self.btnLoad.clicked.connect(self.do_load)
        self.btnSave.clicked.connect(self.do_save)
        self.btnQuit.clicked.connect(self.close)
        for btn in (self.btnFetch, self.btnLoad, self.btnSave, self.btnQuit):
            left.addWidget(btn)
        left.addStretch()
        body.addWidget(inputs_box, 1)

        report_box = QGroupBox("Report")
        right = QVBoxLayout(report_box)
        self.txtReport = QPlainTextEdit()
        self.txtReport.setReadOnly(True)
        self.txtReport.setLineWrapMode(QPlainTextEdit.NoWrap)
        mono = QFont("Monospace")
        mono.setStyleHint(QFont.TypeWriter)
        self.txtReport.setFont(mono)
        right.addWidget(self.txtReport)
        body.addWidget(report_box, 2)
        root.addLayout(body)

        self.lblStatus = QLabel()
        root.addWidget(self.lblStatus)

        # plain-letter hotkeys only when focus is outside the inputs
        for key, slot in (("F", self.do_fetch), ("L", self.do_load), ("S", self.do_save), ("Q", self.close)):
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.setContext(Qt.WidgetWithChildrenShortcut)
            shortcut.activated.connect(lambda s=slot: None if self._typing() else s())

    def _input_labels(self):
        names = [item.name for item in self.session.snapshot.items]
        return ["Shale", "Shard"] + [name.replace("Oathplate ", "").capitalize() for name in names]

    def _typing(self) -> bool:
        return isinstance(self.focusWidget(), QLineEdit)

    def set_status(self, msg: str) -> None:
        self.lblStatus.setText(msg)

    # ------------------------------------------------------------------
    # State → view
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        signals.report_ready.emit(self.session.report())

    def on_report_ready(self, report) -> None:
        mode = "MANUAL" if report.mode is Mode.MANUAL else "FETCHED"
        self.lblHeader.setText(f"Oathplate Calculator {self.version} - {mode}")
        self.txtReport.setPlainText(render_report(report))
        self.set_status(status_line(report))

        # keep inputs in sync with state (avg)
        values = [report.ingredient_a.avg, report.ingredient_b.avg]
        values += [item.price.avg for item in report.items]
        for field, value in zip(INPUT_FIELDS, values):
            self.inputs[field].setText(str(value))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def apply(self, field: str, text: str) -> None:
        try:
            self.session.apply_edit(field, text)
        except InvalidFormat:
            self.set_status(f"Invalid value for {field}. Use 125k, 1.25m, 1,250,000.")
            return
        except UnknownField as e:
            self.set_status(f"Set failed: {e}")
            return
        self.refresh()
        self.set_status(f"Updated {field}")

    def do_fetch(self) -> None:
        if self.fetch_running:
            self.set_status("Fetch already running...")
            return
        self.fetch_running = True
        self.btnFetch.setEnabled(False)
        self.set_status("Fetching...")

        self._thread = QThread(self)
        self._worker = FetchWorker(self.fetcher, self.session.begin_fetch())
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)
        self._worker.finished.connect(self.on_fetch_done)
        self._worker.error.connect(self.on_fetch_error)
        self._worker.finished.connect(self._thread.quit)
        self._worker.error.connect(self._thread.quit)
        self._thread.finished.connect(self._worker.deleteLater)
        self._thread.finished.connect(self._thread.deleteLater)
        self._thread.start()

    def _fetch_cleanup(self) -> None:
        self.fetch_running = False
        self.btnFetch.setEnabled(True)

    def on_fetch_done(self, payload: dict) -> None:
        self._fetch_cleanup()
        applied = self.session.complete_fetch(payload["token"], payload["snapshot"], payload["provenance"])
        if not applied:
            self.set_status("Fetch discarded: prices were edited while it ran.")
            return
        self.refresh()
        self.set_status("Fetched and cached.")

    def on_fetch_error(self, err: str) -> None:
        self._fetch_cleanup()
        self.set_status(f"Fetch failed: {err}")

    def do_load(self) -> None:
        result = self.session.load_cache()
        if result.status is CacheStatus.OK:
            self.refresh()
            self.set_status("Loaded cache.")
        elif result.status is CacheStatus.CORRUPT:
            self.set_status("Cache file is unreadable.")
        else:
            self.set_status("No cache found.")

    def do_save(self) -> None:
        try:
            self.session.save_cache()
        except OSError as e:
            self.set_status(f"Save failed: {e}")
            return
        self.set_status("Saved cache.")
