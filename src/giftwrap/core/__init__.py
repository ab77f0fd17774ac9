"""giftwrap core - configuration, logging and the error taxonomy."""

from .config import (
    RANGE_RANDOM_TIMESTAMP_TWEAK,
    CoreSettings,
    clear_config_cache,
    get_config,
)
from .exceptions import (
    ConfigException,
    DecryptionError,
    EncryptionError,
    GiftWrapException,
    InvalidKeyError,
    MalformedPlaintextError,
    SignatureInvalidError,
    SigningError,
)
from .logging import (
    OperationLogger,
    configure_logging,
    correlation_context,
    operation_logger,
)

__all__ = [
    # Config
    "RANGE_RANDOM_TIMESTAMP_TWEAK",
    "CoreSettings",
    "clear_config_cache",
    "get_config",
    # Exceptions
    "ConfigException",
    "DecryptionError",
    "EncryptionError",
    "GiftWrapException",
    "InvalidKeyError",
    "MalformedPlaintextError",
    "SignatureInvalidError",
    "SigningError",
    # Logging
    "OperationLogger",
    "configure_logging",
    "correlation_context",
    "operation_logger",
]
