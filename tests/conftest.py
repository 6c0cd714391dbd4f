"""Shared fixtures: a fake clock and an engine over the default networks."""

from __future__ import annotations

import pytest

from agentwallet.config import DEFAULT_CONFIG
from agentwallet.daemon.engine import StateEngine
from agentwallet.models import BuildInfo


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def build_info() -> BuildInfo:
    return BuildInfo(
        version="0.1.0",
        platform="linux x86_64",
        runtime="CPython 3.12.0",
        build_time="2026-01-01T00:00:00Z",
        vcs_revision="abc1234",
    )


@pytest.fixture()
def engine(clock: FakeClock, build_info: BuildInfo) -> StateEngine:
    return StateEngine.from_config(DEFAULT_CONFIG, clock=clock, build_info=build_info)
