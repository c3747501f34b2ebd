import os
import sys
import pathlib
import logging
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("QT_OPENGL", "software")
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

try:
    from PySide6.QtWidgets import QApplication
except Exception:  # pragma: no cover
    pytest.skip("PySide6 not available", allow_module_level=True)

from engine.models import PriceSnapshot, Provenance
from gui.threads import FetchWorker


def test_fetch_worker_emits_result(caplog):
    app = QApplication.instance() or QApplication([])
    snap, prov = PriceSnapshot.default(), Provenance()

    worker = FetchWorker(lambda: (snap, prov), token=7)
    payloads, errors = [], []
    worker.finished.connect(lambda p: payloads.append(p))
    worker.error.connect(lambda e: errors.append(e))

    with caplog.at_level(logging.INFO):
        worker.run()

    assert "Price fetch completed" in caplog.text
    assert not errors
    assert payloads[0]["token"] == 7
    assert payloads[0]["snapshot"] is snap
    assert payloads[0]["provenance"] is prov


def test_fetch_worker_emits_error():
    app = QApplication.instance() or QApplication([])

    def failing():
        raise RuntimeError("Oathplate shards fetch: timeout")

    worker = FetchWorker(failing, token=0)
    payloads, errors = [], []
    worker.finished.connect(lambda p: payloads.append(p))
    worker.error.connect(lambda e: errors.append(e))
    worker.run()

    assert errors == ["Oathplate shards fetch: timeout"]
    assert not payloads
