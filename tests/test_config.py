import pytest
from pathlib import Path

from engine.config import ConfigManager, ConfigError


def test_defaults_and_roundtrip(tmp_path):
    cfg_path = tmp_path / 'config.yaml'
    cm = ConfigManager(config_path=str(cfg_path))
    cfg = cm.load_config()
    assert cfg['api']['timeout_seconds'] == 10
    assert len(cfg['items']['crafted']) == 3
    cfg['logging']['level'] = 'DEBUG'
    cfg['api']['timeout_seconds'] = 5
    cm.save_config(cfg)
    cm2 = ConfigManager(config_path=str(cfg_path))
    loaded = cm2.load_config()
    assert loaded['logging']['level'] == 'DEBUG'
    assert cm2.get('api.timeout_seconds') == 5


def test_load_missing_returns_defaults(tmp_path):
    cfg_path = tmp_path / 'missing.yaml'
    cm = ConfigManager(config_path=str(cfg_path))
    assert cm.load_config() == cm.get_default_config()
    assert cm.validate_config() == []


def test_partial_file_is_merged(tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text("api:\n  timeout_seconds: 4\n", encoding='utf-8')
    cm = ConfigManager(config_path=str(cfg_path))
    cm.load_config()
    assert cm.get('api.timeout_seconds') == 4
    assert cm.get('api.base_url').startswith("https://prices.runescape.wiki")
    assert cm.get_crafted_items()[0] == ("Oathplate helm", 30750)


def test_merge_does_not_mutate_defaults(tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text("api:\n  timeout_seconds: 4\n", encoding='utf-8')
    cm = ConfigManager(config_path=str(cfg_path))
    cm.load_config()
    assert cm.get_default_config()['api']['timeout_seconds'] == 10


def test_corrupt_yaml_raises(tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text('[')
    cm = ConfigManager(config_path=str(cfg_path))
    with pytest.raises(ConfigError):
        cm.load_config()


def test_non_mapping_raises(tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text('- a\n- b\n')
    with pytest.raises(ConfigError):
        ConfigManager(config_path=str(cfg_path)).load_config()


def test_permission_error(monkeypatch, tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text('x')
    cm = ConfigManager(config_path=str(cfg_path))

    def bad_open(*a, **k):
        raise PermissionError("nope")

    monkeypatch.setattr(Path, 'open', lambda self, *a, **k: bad_open())
    with pytest.raises(ConfigError):
        cm.load_config()


def test_validate_reports_problems(tmp_path):
    cm = ConfigManager(config_path=str(tmp_path / 'missing.yaml'))
    cm.load_config()
    cm.set('items.crafted', [{'name': 'x', 'id': 1}])
    cm.set('api.timeout_seconds', 0)
    errors = cm.validate_config()
    assert any('exactly 3' in e for e in errors)
    assert any('timeout' in e for e in errors)
