"""
Auto-start orchestration run by the CLI before every command.

Protocol:
1. Probe ``/health`` with a short timeout. Healthy -> nothing to do.
2. Spawn a detached daemon with the client's config path.
3. Poll ``/health`` at a fixed interval until it answers or the deadline passes.

Two clients may race and both spawn. The loser's daemon fails to bind the
port and exits; its client still sees the winner answer the probe, which is
a success.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from ..errors import AutoStartTimeoutError
from .api import DaemonClient

logger = logging.getLogger(__name__)

AUTO_START_TIMEOUT_SEC = 8.0
POLL_INTERVAL_SEC = 0.25


def daemon_command(config_path: Path) -> list[str]:
    return [sys.executable, "-m", "agentwallet", "--daemon", "--config", str(config_path)]


def spawn_daemon(config_path: Path) -> subprocess.Popen:
    """
    Launch the daemon fully detached from this process.

    The child gets its own session (POSIX) or process group (Windows) and no
    inherited stdio, so it outlives the CLI invocation.
    """
    kwargs: dict = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "close_fds": True,
        "cwd": os.getcwd(),
    }
    if os.name == "nt":
        kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
    else:
        kwargs["start_new_session"] = True
    proc = subprocess.Popen(daemon_command(config_path), **kwargs)
    logger.info("Spawned AgentWallet daemon (pid %s)", proc.pid)
    return proc


def ensure_daemon_running(
    config_path: Path,
    *,
    client: Optional[DaemonClient] = None,
    spawn: Callable[[Path], object] = spawn_daemon,
    sleep: Callable[[float], None] = time.sleep,
    monotonic: Callable[[], float] = time.monotonic,
    timeout: float = AUTO_START_TIMEOUT_SEC,
    poll_interval: float = POLL_INTERVAL_SEC,
) -> bool:
    """
    Make sure a daemon answers on the control port.

    Args:
        config_path: Config file passed through to a spawned daemon
        client: Daemon client used for probing
        spawn: Process launcher (injectable for tests)
        sleep: Sleep function (injectable for tests)
        monotonic: Clock for the deadline (injectable for tests)
        timeout: Overall wait after spawning, in seconds
        poll_interval: Delay between probes, in seconds

    Returns:
        True if a daemon was spawned, False if one was already running

    Raises:
        AutoStartTimeoutError: If no daemon answers before the deadline
    """
    client = client or DaemonClient()
    if client.is_healthy():
        return False

    try:
        spawn(config_path)
    except OSError as exc:
        # A concurrently started sibling may still come up.
        logger.warning("Failed to spawn AgentWallet daemon: %s", exc)
    sleep(poll_interval)

    deadline = monotonic() + timeout
    while monotonic() < deadline:
        if client.is_healthy():
            return True
        sleep(poll_interval)

    raise AutoStartTimeoutError("Timed out waiting for AgentWallet daemon to start.")
