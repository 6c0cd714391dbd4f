__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "StateEngine",
    "MOCK_ACCOUNTS",
    # Models
    "AccountRecord",
    "BalanceResult",
    "BuildInfo",
    "NetworkDescriptor",
    "SessionStatus",
    "TransactionRecord",
    "TransactionStatusResult",
    "TxStatus",
    "WalletConfig",
    "WalletConnectSession",
    # Config
    "DEFAULT_CONFIG_FILENAME",
    "load_config",
    "resolve_config_path",
    # Client
    "DaemonClient",
    "ensure_daemon_running",
    # Errors
    "AgentWalletError",
    "AutoStartTimeoutError",
    "ConfigError",
    "DaemonRequestError",
    "InternalError",
    "NotFoundError",
    "TransportError",
    "ValidationError",
]

from .errors import (
    AgentWalletError,
    AutoStartTimeoutError,
    ConfigError,
    DaemonRequestError,
    InternalError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .models import (
    AccountRecord,
    BalanceResult,
    BuildInfo,
    NetworkDescriptor,
    SessionStatus,
    TransactionRecord,
    TransactionStatusResult,
    TxStatus,
    WalletConfig,
    WalletConnectSession,
)
from .config import DEFAULT_CONFIG_FILENAME, load_config, resolve_config_path
from .daemon.engine import MOCK_ACCOUNTS, StateEngine
from .client.api import DaemonClient
from .client.autostart import ensure_daemon_running
