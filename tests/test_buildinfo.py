"""Tests for build metadata and logging level selection."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from agentwallet import __version__
from agentwallet.daemon import buildinfo
from agentwallet.logs import log_level_name


@pytest.fixture(autouse=True)
def _clear_revision_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in buildinfo.REVISION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestVcsRevision:
    def test_env_override_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_COMMIT", " 1a2b3c4 ")
        with patch.object(buildinfo.subprocess, "run") as run:
            assert buildinfo.detect_vcs_revision() == "1a2b3c4"
        run.assert_not_called()

    def test_git_output(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="deadbee\n")
        with patch.object(buildinfo.subprocess, "run", return_value=completed):
            assert buildinfo.detect_vcs_revision() == "deadbee"

    def test_not_a_repository(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=128, stdout="")
        with patch.object(buildinfo.subprocess, "run", return_value=completed):
            assert buildinfo.detect_vcs_revision() is None

    def test_git_missing(self) -> None:
        with patch.object(buildinfo.subprocess, "run", side_effect=FileNotFoundError("git")):
            assert buildinfo.detect_vcs_revision() is None


def test_compute_build_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENTWALLET_GIT_COMMIT", "cafe123")
    info = buildinfo.compute_build_info().to_dict()
    assert info["version"] == __version__
    assert info["vcsRevision"] == "cafe123"
    assert info["buildTime"].endswith("Z")
    assert info["runtime"]


def test_build_info_omits_missing_revision() -> None:
    with patch.object(buildinfo, "detect_vcs_revision", return_value=None):
        assert "vcsRevision" not in buildinfo.compute_build_info().to_dict()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, "INFO"), ("debug", "DEBUG"), (" Warning ", "WARNING"), ("NOTSET", "INFO"), ("loud", "INFO")],
)
def test_log_level_name(monkeypatch: pytest.MonkeyPatch, raw, expected) -> None:
    if raw is None:
        monkeypatch.delenv("AGENTWALLET_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("AGENTWALLET_LOG_LEVEL", raw)
    assert log_level_name() == expected
