# high_score_store.py
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

logger = logging.getLogger(__name__)

HIGH_SCORE_FILE_NAME = "highscore.txt"


def default_high_score_path() -> Path:
    return Path(user_data_dir("Vigi", "Vigi")) / HIGH_SCORE_FILE_NAME


class HighScoreStore:
    """
    Durable storage for the single best score.

    - The file holds one base-10 integer and nothing else
    - Missing, unreadable, corrupt or negative values read back as 0
    - Writes go to a temp file in the same directory and are swapped in with os.replace
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else default_high_score_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> int:
        try:
            raw_text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except OSError as exception:
            logger.warning("could not read high score from %s: %s", self._path, exception)
            return 0

        try:
            value = int(raw_text.strip())
        except ValueError:
            logger.warning("ignoring corrupt high score file %s", self._path)
            return 0

        if value < 0:
            logger.warning("ignoring negative high score %d in %s", value, self._path)
            return 0
        return value

    def save(self, score: int) -> None:
        value = max(0, int(score))
        self._path.parent.mkdir(parents=True, exist_ok=True)

        file_descriptor, temp_name = tempfile.mkstemp(prefix=".highscore-", suffix=".tmp", dir=str(self._path.parent))
        try:
            with os.fdopen(file_descriptor, "w", encoding="utf-8") as handle:
                handle.write(str(value))
            os.replace(temp_name, self._path)
        except OSError:
            try:
                os.unlink(temp_name)
            except OSError:
                pass
            raise
        logger.info("high score %d written to %s", value, self._path)

    def record_if_higher(self, score: int) -> bool:
        """Persist `score` when it beats the stored value. Returns True when a write happened."""
        if int(score) <= self.load():
            return False
        try:
            self.save(int(score))
        except OSError as exception:
            logger.warning("could not write high score to %s: %s", self._path, exception)
            return False
        return True
