#!/usr/bin/env python3
"""
Oathplate Calculator - Main Entry Point

Crafting profit calculator for Oathplate armour, with a terminal dashboard and
an optional desktop window.
"""

import argparse
import functools
import sys
from typing import Optional, Sequence

from engine.config import ConfigError, ConfigManager
from logging_config import get_logger
from utils.paths import init_app_paths


def build_session(config_manager: ConfigManager):
    """Create the session and the fetch callable from configuration."""
    from datasources.osrs_prices import PriceAPIClient
    from services.cache_store import CacheStore
    from services.fetch import fetch_snapshot
    from services.session import AppSession
    from engine.models import PriceSnapshot

    config = config_manager.get_config()
    client = PriceAPIClient(config)
    fetcher = functools.partial(fetch_snapshot, client, config_manager.get_items_config())

    session = AppSession(
        CacheStore(config_manager.get_cache_path()),
        snapshot=PriceSnapshot.default(config_manager.get_crafted_items()),
    )
    return session, fetcher


def run_gui(config_manager: ConfigManager, session, fetcher) -> int:
    from PySide6.QtWidgets import QApplication
    from gui.dashboard import DashboardWidget

    app = QApplication(sys.argv)
    app.setApplicationName(config_manager.get('app.name', "Oathplate Calculator"))
    app.setApplicationVersion(config_manager.get('app.version', "1.0.0"))

    session.load_cache()
    window = DashboardWidget(session, fetcher, version=config_manager.get('app.version', "1.0.0"))
    window.resize(config_manager.get('ui.window_width', 1100), config_manager.get('ui.window_height', 700))
    window.show()
    return app.exec()


def run_terminal(config_manager: ConfigManager, session, fetcher) -> int:
    from cli import TerminalDashboard

    dashboard = TerminalDashboard(session, fetcher, crafted=config_manager.get_crafted_items())
    try:
        return dashboard.run()
    except (KeyboardInterrupt, EOFError):
        print()
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    parser = argparse.ArgumentParser(prog="oathplate", description="Oathplate crafting profit calculator")
    parser.add_argument("--gui", action="store_true", help="open the desktop dashboard")
    parser.add_argument("--config", help="path to a YAML config file")
    args = parser.parse_args(argv)

    init_app_paths()
    config_manager = ConfigManager(args.config)
    try:
        config_manager.load_config()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    log = get_logger(__name__, level=config_manager.get('logging.level', "INFO"), console=args.gui)
    problems = config_manager.validate_config()
    for problem in problems:
        log.error("Config: %s", problem)
    if problems:
        print(f"Config error: {'; '.join(problems)}", file=sys.stderr)
        return 2

    session, fetcher = build_session(config_manager)
    log.info("Starting Oathplate Calculator (%s)", "gui" if args.gui else "terminal")

    if args.gui:
        return run_gui(config_manager, session, fetcher)
    return run_terminal(config_manager, session, fetcher)


if __name__ == "__main__":
    sys.exit(main())
