"""Shared fixtures: fresh stores and a deterministic clock."""

from datetime import datetime, timedelta, timezone

import pytest

from bookie.models import BetOdds
from bookie.storage import BetLedger, GameRegistry

START = datetime(2026, 1, 15, 0, 30, tzinfo=timezone.utc)


class StepClock:
    """Returns a new time, one minute later, on every call."""

    def __init__(self, start: datetime = START - timedelta(days=1)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def registry() -> GameRegistry:
    return GameRegistry()


@pytest.fixture
def ledger(registry: GameRegistry, clock: StepClock) -> BetLedger:
    return BetLedger(registry, clock=clock)


@pytest.fixture
def game(registry: GameRegistry):
    return registry.register("NBA", "Lakers", "Warriors", START)


def odds(bet_type: str, selection: str, line: float | None = None, price: float = -110) -> BetOdds:
    return BetOdds(type=bet_type, line=line, odds=price, selection=selection)
