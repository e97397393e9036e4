"""Shared fixtures"""

import pytest

from retryplan.infrastructure.config.config_manager import ConfigManager


class FakeClock:
    """Clock returning a controllable time"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep RETRYPLAN_* variables from the outer environment out of tests"""
    for name in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
