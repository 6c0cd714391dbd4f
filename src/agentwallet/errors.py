"""
Error taxonomy shared by the daemon and the CLI.

Every error carries the process exit code and the envelope code the CLI
reports for it. The control surface maps the invalid-argument family to
HTTP 400 and everything else to HTTP 500.
"""

from __future__ import annotations

INVALID_ARGS = "INVALID_ARGS"
RUNTIME_ERROR = "RUNTIME_ERROR"

EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_INVALID_ARGS = 2


class AgentWalletError(RuntimeError):
    exit_code: int = EXIT_RUNTIME_ERROR
    code: str = RUNTIME_ERROR


class ValidationError(AgentWalletError):
    """Malformed or out-of-domain input."""

    exit_code = EXIT_INVALID_ARGS
    code = INVALID_ARGS


class NotFoundError(AgentWalletError):
    """Unknown identifier. Reported as a client-input problem, not a 404."""

    exit_code = EXIT_INVALID_ARGS
    code = INVALID_ARGS


class ConfigError(AgentWalletError):
    pass


class TransportError(AgentWalletError):
    """Daemon unreachable: connection refused, timeout, reset."""


class AutoStartTimeoutError(TransportError):
    pass


class DaemonRequestError(AgentWalletError):
    """The daemon answered with a non-client error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InternalError(AgentWalletError):
    pass


def is_invalid_args(exc: BaseException) -> bool:
    return isinstance(exc, AgentWalletError) and exc.code == INVALID_ARGS


__all__ = [
    "AgentWalletError",
    "AutoStartTimeoutError",
    "ConfigError",
    "DaemonRequestError",
    "EXIT_INVALID_ARGS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_SUCCESS",
    "INVALID_ARGS",
    "InternalError",
    "NotFoundError",
    "RUNTIME_ERROR",
    "TransportError",
    "ValidationError",
    "is_invalid_args",
]
