from pathlib import Path

from platformdirs import user_data_dir, user_log_dir

APP_NAME = "OathplateCalculator"
APP_VENDOR = "Oathplate"

DATA_DIR = Path(user_data_dir(APP_NAME, APP_VENDOR))
LOG_DIR = Path(user_log_dir(APP_NAME, APP_VENDOR))
CONFIG_PATH = DATA_DIR / "config.yaml"
CACHE_PATH = DATA_DIR / "prices_cache.json"


def init_app_paths() -> None:
    for _p in (DATA_DIR, LOG_DIR):
        _p.mkdir(parents=True, exist_ok=True)
