import main as entry
from engine.config import ConfigManager


def test_bad_config_exits_with_2(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(entry, "init_app_paths", lambda: None)
    cfg = tmp_path / "config.yaml"
    cfg.write_text("[", encoding="utf-8")
    assert entry.main(["--config", str(cfg)]) == 2
    assert "Config error" in capsys.readouterr().err


def test_build_session_uses_config(tmp_path):
    cfg = tmp_path / "config.yaml"
    cache = tmp_path / "cache.json"
    cfg.write_text(
        "cache:\n"
        f"  path: {cache.as_posix()}\n"
        "items:\n"
        "  crafted:\n"
        "    - {name: Helm, id: 1}\n"
        "    - {name: Body, id: 2}\n"
        "    - {name: Legs, id: 3}\n",
        encoding="utf-8",
    )
    cm = ConfigManager(config_path=str(cfg))
    cm.load_config()

    session, fetcher = entry.build_session(cm)
    assert session.cache_store.path == cache
    assert [item.name for item in session.snapshot.items] == ["Helm", "Body", "Legs"]
    assert callable(fetcher)
