# macdevice/__init__.py
"""
macdevice - Mac model identifier lookup

Top-level package metadata and convenience functions.
- Resolves the host's model identifier (e.g. "Mac16,12").
- Maps it to a device category, marketing name, icon and battery flag.
- Defers the classifier and table load until first use.
"""

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "default_classifier",
    "model_identifier",
    "device_type_description",
    "device_full_description",
    "device_icon_name",
    "has_battery",
    "describe",
    "DeviceClassifier",
    "DeviceCategory",
    "DeviceType",
    "DeviceReport",
    "MappingTable",
    "MappingTableLoader",
]

import logging
from functools import lru_cache
from importlib import import_module

_logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared classifier, built once from the loaded configuration
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def default_classifier():
    """Return the process-wide classifier configured from config files."""
    from macdevice.config.config import load_config
    from macdevice.core.classifier import DeviceClassifier

    _logger.debug("Building default classifier")
    return DeviceClassifier.from_config(load_config())


def model_identifier() -> str:
    """Return the host model identifier, or "" if it cannot be read."""
    return default_classifier().model_identifier()


def device_type_description() -> str:
    """Return the host's device category, e.g. "MacBook Air"."""
    return default_classifier().device_type_description()


def device_full_description() -> str:
    """Return the host's marketing name, e.g. "MacBook Air (13-inch, M4, 2025)"."""
    return default_classifier().device_full_description()


def device_icon_name() -> str:
    return default_classifier().device_icon_name()


def has_battery() -> bool:
    return default_classifier().has_battery()


def describe():
    """Return a DeviceReport for the host."""
    return default_classifier().describe()


# ---------------------------------------------------------------------------
# Lazy import layer: types are only imported when accessed
# ---------------------------------------------------------------------------
def __getattr__(name: str):
    """Dynamically expose classes only when accessed."""
    mapping = {
        "DeviceClassifier": "macdevice.core.classifier",
        "DeviceCategory": "macdevice.data.device_types",
        "DeviceType": "macdevice.data.device_types",
        "DeviceReport": "macdevice.data.device_types",
        "MappingTable": "macdevice.data.device_types",
        "MappingTableLoader": "macdevice.data.mappings",
    }

    if name in mapping:
        module = import_module(mapping[name])
        obj = getattr(module, name)
        globals()[name] = obj  # cache for future lookups
        return obj

    raise AttributeError(f"module 'macdevice' has no attribute '{name}'")
