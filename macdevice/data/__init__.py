"""
Data models and the bundled model identifier table for macdevice.
"""

from .device_types import (
    DeviceCategory, DeviceType, DeviceReport, ModelEntry, MappingTable,
    CATEGORY_ICONS, DEFAULT_ICON, PORTABLE_CATEGORIES, Percentage
)
from .mappings import (
    BUNDLED_MAPPINGS_PATH, MappingTableLoader, load_mapping_table
)

__all__ = [
    'DeviceCategory', 'DeviceType', 'DeviceReport', 'ModelEntry', 'MappingTable',
    'CATEGORY_ICONS', 'DEFAULT_ICON', 'PORTABLE_CATEGORIES', 'Percentage',
    'BUNDLED_MAPPINGS_PATH', 'MappingTableLoader', 'load_mapping_table'
]
