import logging

import pytest

import logging_config


@pytest.fixture
def fresh_root(monkeypatch):
    monkeypatch.setattr(logging_config, "_LOG_CONFIGURED", False)
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield root, before
    for h in [h for h in root.handlers if h not in before]:
        root.removeHandler(h)
        h.close()
    root.setLevel(level)


def test_get_logger_writes_rotating_file(tmp_path, fresh_root):
    root, before = fresh_root
    log = logging_config.get_logger("oathplate.test", console=False, log_dir=tmp_path)
    log.info("hello from test")
    added = [h for h in root.handlers if h not in before]
    assert len(added) == 1
    added[0].flush()
    assert "hello from test" in (tmp_path / "app.log").read_text(encoding="utf-8")


def test_configured_level_applies_without_console(tmp_path, fresh_root):
    root, before = fresh_root
    log = logging_config.get_logger("oathplate.test", level="WARNING", console=False, log_dir=tmp_path)
    log.info("quiet info")
    log.warning("loud warning")
    added = [h for h in root.handlers if h not in before]
    assert added[0].level == logging.WARNING
    added[0].flush()
    text = (tmp_path / "app.log").read_text(encoding="utf-8")
    assert "loud warning" in text
    assert "quiet info" not in text
