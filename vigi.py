"""
vigi.py

Real entrypoint that launches the game.

Integration
- Parses command line options
- Configures logging
- Loads config and the high score store
- Instantiates GameLoop and MainWindow and starts the Qt event loop
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QApplication

import config
import game_loop
import high_score_store
import main_window

logger = logging.getLogger(__name__)


def _build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(description="Vigi reaction game")
    argument_parser.add_argument("--config", type=Path, default=None, help="Path of a vigi_config.json file.")
    argument_parser.add_argument("--seed", type=int, default=None, help="Seed the event generator for a repeatable run.")
    argument_parser.add_argument("--fullscreen", action="store_true", help="Start in fullscreen.")
    argument_parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Overrides logging.level from the config file.",
    )
    return argument_parser


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_high_score_path(app_config: config.AppConfig) -> Optional[Path]:
    path_text = app_config.storage.high_score_path
    if not path_text:
        return None
    return Path(path_text).expanduser()


def main(argv: Optional[list[str]] = None) -> int:
    parsed_args = _build_argument_parser().parse_args(argv)

    try:
        app_config, config_path = config.load_config(parsed_args.config)
    except (OSError, ValueError) as exception:
        _configure_logging("ERROR")
        logger.error("%s", exception)
        return 2

    _configure_logging(parsed_args.log_level or app_config.logging.level)
    logger.info("config: %s", config_path if config_path is not None else "(defaults)")

    qt_application = QApplication(sys.argv)

    score_store = high_score_store.HighScoreStore(_resolve_high_score_path(app_config))
    loop = game_loop.GameLoop(
        settings=app_config.game,
        score_store=score_store,
        rng=random.Random(parsed_args.seed),
    )

    window = main_window.MainWindow(loop)
    window.resize(1024, 768)
    window.show()

    if parsed_args.fullscreen:
        window.showFullScreen()

    exit_code = int(qt_application.exec())
    loop.stop()
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
