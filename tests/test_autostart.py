"""Tests for the probe / spawn / poll auto-start protocol."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from agentwallet.client import autostart
from agentwallet.client.autostart import daemon_command, ensure_daemon_running
from agentwallet.errors import AutoStartTimeoutError, TransportError


class FakeProbe:
    """Health probe answering from a scripted sequence (last answer repeats)."""

    def __init__(self, answers: list[bool]) -> None:
        self.answers = list(answers)
        self.calls = 0

    def is_healthy(self) -> bool:
        self.calls += 1
        if len(self.answers) > 1:
            return self.answers.pop(0)
        return self.answers[0]


class FakeTime:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def monotonic(self) -> float:
        return self.now


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


def _run(probe: FakeProbe, fake_time: FakeTime, spawned: list, spawn=None) -> bool:
    return ensure_daemon_running(
        Path("/tmp/wallet.conf.json"),
        client=probe,  # type: ignore[arg-type]
        spawn=spawn or spawned.append,
        sleep=fake_time.sleep,
        monotonic=fake_time.monotonic,
    )


class TestEnsureDaemonRunning:
    def test_already_running_does_not_spawn(self, fake_time: FakeTime) -> None:
        spawned: list = []
        assert _run(FakeProbe([True]), fake_time, spawned) is False
        assert spawned == []
        assert fake_time.sleeps == []

    def test_spawns_and_waits(self, fake_time: FakeTime) -> None:
        spawned: list = []
        probe = FakeProbe([False, False, False, True])
        assert _run(probe, fake_time, spawned) is True
        assert spawned == [Path("/tmp/wallet.conf.json")]
        assert probe.calls == 4
        assert all(s == pytest.approx(0.25) for s in fake_time.sleeps)

    def test_times_out(self, fake_time: FakeTime) -> None:
        spawned: list = []
        with pytest.raises(AutoStartTimeoutError, match="Timed out"):
            _run(FakeProbe([False]), fake_time, spawned)
        assert len(spawned) == 1
        # Initial settle + polls until the 8 s deadline.
        assert fake_time.now == pytest.approx(8.25)

    def test_timeout_is_transport_error(self) -> None:
        assert issubclass(AutoStartTimeoutError, TransportError)
        assert AutoStartTimeoutError.exit_code == 1

    def test_sibling_wins_race(self, fake_time: FakeTime) -> None:
        """Our spawn loses the port, but a sibling daemon answers: success."""
        probe = FakeProbe([False, True])

        def spawn_that_loses(_path: Path) -> None:
            raise OSError("address already in use")

        assert _run(probe, fake_time, [], spawn=spawn_that_loses) is True


class TestSpawnDaemon:
    def test_command_reuses_interpreter_and_config(self) -> None:
        cmd = daemon_command(Path("/etc/agentwallet/wallet.conf.json"))
        assert cmd[:3] == [sys.executable, "-m", "agentwallet"]
        assert cmd[3:] == ["--daemon", "--config", "/etc/agentwallet/wallet.conf.json"]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX detach flags")
    def test_spawn_is_detached(self) -> None:
        with patch.object(autostart.subprocess, "Popen") as popen:
            popen.return_value.pid = 4242
            autostart.spawn_daemon(Path("/tmp/wallet.conf.json"))
        kwargs = popen.call_args.kwargs
        assert kwargs["start_new_session"] is True
        assert kwargs["stdin"] is subprocess.DEVNULL
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL
