from typing import Any, Iterable, List, Optional, Sequence

import pytest
from PyQt6.QtCore import QCoreApplication

import config
import timing_model


class ManualClock:
    """Seconds source for TimingModel that only moves when a test says so."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.current_ms = float(start_ms)

    def __call__(self) -> float:
        return self.current_ms / 1000.0

    def set_ms(self, value_ms: float) -> None:
        self.current_ms = float(value_ms)

    def advance_ms(self, delta_ms: float) -> None:
        self.current_ms += float(delta_ms)


class ScriptedRandom:
    """Feeds queued samples to random() and queued picks to choice()."""

    def __init__(self, samples: Iterable[float] = (), choices: Iterable[Any] = ()) -> None:
        self.samples: List[float] = list(samples)
        self.choices: List[Any] = list(choices)
        self.random_calls = 0

    def random(self) -> float:
        self.random_calls += 1
        if not self.samples:
            # Never fires: above any gate probability used in tests.
            return 0.999
        return self.samples.pop(0)

    def choice(self, options: Sequence[Any]) -> Any:
        if not self.choices:
            return options[0]
        picked = self.choices.pop(0)
        assert picked in options
        return picked

    def queue(self, *samples: float, choices: Optional[Iterable[Any]] = None) -> None:
        self.samples.extend(samples)
        if choices is not None:
            self.choices.extend(choices)


@pytest.fixture(scope="session")
def qapp():
    application = QCoreApplication.instance()
    if application is None:
        application = QCoreApplication([])
    return application


@pytest.fixture()
def clock():
    return ManualClock(start_ms=100_000.0)


@pytest.fixture()
def timing(clock):
    return timing_model.TimingModel(clock)


@pytest.fixture()
def scripted_rng():
    return ScriptedRandom()


@pytest.fixture()
def settings():
    return config.GameSettings(
        base_speed_ms=1000,
        change_frequency=0.3,
        score_windows={
            "excellent": {"time_ms": 1000, "points": 20},
            "good": {"time_ms": 2000, "points": 10},
        },
    )
