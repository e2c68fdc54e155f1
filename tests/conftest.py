from __future__ import annotations

import random

import pytest

from botshield.challenges import ChallengeEngine
from botshield.ledger import ThreatLedger
from botshield.protection import BotProtection

BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "accept-language": "en-US,en;q=0.9",
    "accept-encoding": "gzip, deflate, br",
}


class FakeClock:
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return ThreatLedger(clock=clock)


@pytest.fixture
def engine(clock):
    return ChallengeEngine(rng=random.Random(1234), clock=clock)


@pytest.fixture
def protection(ledger, engine, clock):
    return BotProtection(ledger=ledger, challenges=engine, clock=clock)
