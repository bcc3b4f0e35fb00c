from importlib.metadata import entry_points
from typing import Dict, Type

from .logger import get_logger

logger = get_logger(__name__)

ADAPTER_ENTRY_POINT_GROUP = "orm_adapter_sdk.adapters"


def discover_adapters() -> Dict[str, Type]:
    """Discovers installed adapters via 'orm_adapter_sdk.adapters' entry points.

    Returns:
        Dict[str, Type[ConnectionAdapter]]: Dict mapping adapter name (e.g., 'bigquery')
            to the Adapter Class.
    """
    adapters = {}
    for ep in entry_points(group=ADAPTER_ENTRY_POINT_GROUP):
        try:
            adapter_cls = ep.load()
            adapters[ep.name] = adapter_cls
        except Exception as e:
            logger.error(f"Failed to load adapter {ep.name}: {e}")

    return adapters
