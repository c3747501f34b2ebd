from PySide6.QtCore import QObject, Signal


class AppSignals(QObject):
    """Central application-wide signals bus."""

    report_ready = Signal(object)


signals = AppSignals()
