"""
Build metadata reported by ``/version`` and ``/build-info``.

The VCS revision is a best-effort fact: an explicit environment override
wins, otherwise ``git rev-parse`` is tried once. Any failure simply leaves
the revision unset.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
import sys
from typing import Optional

from .. import __version__
from ..models import BuildInfo
from ..utils import utc_now_rfc3339

logger = logging.getLogger(__name__)

REVISION_ENV_VARS = ("AGENTWALLET_GIT_COMMIT", "GIT_COMMIT")
GIT_TIMEOUT_SEC = 2.0


def detect_vcs_revision() -> Optional[str]:
    for name in REVISION_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=GIT_TIMEOUT_SEC,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git revision lookup failed: %s", exc)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def runtime_description() -> str:
    return f"{platform.python_implementation()} {platform.python_version()}"


def compute_build_info() -> BuildInfo:
    return BuildInfo(
        version=__version__,
        platform=f"{sys.platform} {platform.machine()}",
        runtime=runtime_description(),
        build_time=utc_now_rfc3339(),
        vcs_revision=detect_vcs_revision(),
    )
