from typing import Any, Mapping

from .discovery import discover_adapters
from .errors import AdapterNotFoundError, ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)


def establish_connection(config: Mapping[str, Any]):
    """Builds the adapter named by ``config["adapter"]``.

    Args:
        config (Mapping[str, Any]): Connection settings; the remaining keys are
            handed to the adapter class's ``from_config``.

    Returns:
        ConnectionAdapter: A configured, not yet connected adapter.

    Raises:
        ConfigurationError: If no adapter is named.
        AdapterNotFoundError: If the named adapter is not installed.
    """
    adapter_name = config.get("adapter")
    if not adapter_name:
        raise ConfigurationError("No adapter is specified. Missing argument: adapter.")

    available = discover_adapters()
    key = str(adapter_name).lower()
    if key not in available:
        raise AdapterNotFoundError(
            f"No adapter found for '{adapter_name}'. "
            f"Available adapters: {sorted(available)}. "
            "Please install the appropriate adapter package."
        )

    logger.debug(f"Establishing connection with adapter '{key}'")
    return available[key].from_config(config)
