#data/device_types.py
from __future__ import annotations
import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, Optional, Annotated, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

_log = logging.getLogger("macdevice.data.types")

# --- CUSTOM PYDANTIC TYPES ---
Percentage = Annotated[float, Field(ge=0.0, le=100.0)]
# ------------------------------------------------------------------

# Suffix of the legacy per-model icon keys, e.g. "Mac16,12_icon"
LEGACY_ICON_SUFFIX = "_icon"


# --- ENUM DEFINITIONS ---
class DeviceCategory(str, Enum):
    """Device families a model identifier can resolve to.

    Values are the display strings shown to users and used as the
    top-level keys of the mapping table.
    """
    MACBOOK_PRO = "MacBook Pro"
    MACBOOK_AIR = "MacBook Air"
    MAC_MINI = "Mac mini"
    IMAC = "iMac"
    MAC_STUDIO = "Mac Studio"
    MAC_PRO = "Mac Pro"


DEFAULT_ICON = "desktopcomputer"

CATEGORY_ICONS: Dict[DeviceCategory, str] = {
    DeviceCategory.MACBOOK_PRO: "macbook",
    DeviceCategory.MACBOOK_AIR: "macbook",
    DeviceCategory.MAC_MINI: "macmini",
    DeviceCategory.IMAC: "desktopcomputer",
    DeviceCategory.MAC_STUDIO: "macstudio",
    DeviceCategory.MAC_PRO: "macpro.gen3",
}

PORTABLE_CATEGORIES = frozenset({DeviceCategory.MACBOOK_AIR, DeviceCategory.MACBOOK_PRO})


# --- CLASSIFICATION RESULTS ---
class DeviceType(BaseModel):
    """Result of classifying one identifier.

    ``category`` is None when nothing matched; ``description`` then falls
    back to the raw identifier.
    """
    model_config = ConfigDict(frozen=True)
    identifier: str
    category: Optional[DeviceCategory] = None

    @property
    def description(self) -> str:
        if self.category is None:
            return self.identifier
        return self.category.value

    @property
    def icon(self) -> str:
        if self.category is None:
            return DEFAULT_ICON
        return CATEGORY_ICONS.get(self.category, DEFAULT_ICON)

    @property
    def has_battery(self) -> bool:
        return self.category in PORTABLE_CATEGORIES


class DeviceReport(BaseModel):
    model_config = ConfigDict(frozen=True)
    identifier: str
    category: str
    full_name: str
    icon: str
    has_battery: bool
    battery_percent: Optional[Percentage] = None


# --- MAPPING TABLE ---
class ModelEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    name: Optional[str] = None
    icon: Optional[str] = None


def _normalize_models(category: Any, models: Any) -> Dict[str, Dict[str, Any]]:
    """Turn one category's raw mapping into ModelEntry-shaped dicts.

    Plain string values become ``{"name": value}``. Legacy
    ``"<identifier>_icon"`` keys are folded into that identifier's entry.
    """
    if not isinstance(models, dict):
        raise ValueError(f"category {category!r} must map identifiers to names")

    entries: Dict[str, Dict[str, Any]] = {}
    legacy_icons: Dict[str, Any] = {}

    for key, value in models.items():
        if not isinstance(key, str):
            raise ValueError(f"identifier keys must be strings, got {key!r}")
        if key.endswith(LEGACY_ICON_SUFFIX) and len(key) > len(LEGACY_ICON_SUFFIX):
            legacy_icons[key[:-len(LEGACY_ICON_SUFFIX)]] = value
        elif isinstance(value, str):
            entries[key] = {"name": value}
        elif isinstance(value, dict):
            entries[key] = dict(value)
        else:
            raise ValueError(f"entry {key!r} in {category!r} must be a name or an object")

    for identifier, icon in legacy_icons.items():
        if not isinstance(icon, str):
            raise ValueError(f"icon for {identifier!r} in {category!r} must be a string")
        entry = entries.setdefault(identifier, {})
        # an explicit "icon" field wins over the legacy key
        entry.setdefault("icon", icon)

    return entries


class MappingTable(BaseModel):
    """Category -> (identifier -> ModelEntry), read-only after load.

    Categories are searched in insertion order. An identifier counts as
    present under a category only when its entry carries a display name.
    """
    model_config = ConfigDict(frozen=True)
    categories: Dict[DeviceCategory, Dict[str, ModelEntry]] = Field(default_factory=dict, validate_default=True)

    @field_validator("categories", mode="before")
    @classmethod
    def normalize_categories(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("mapping table must be an object keyed by category")
        return {category: _normalize_models(category, models) for category, models in v.items()}

    @field_validator("categories", mode="after")
    @classmethod
    def freeze_categories(cls, v):
        # read-only views so the loaded table cannot be changed in place
        return MappingProxyType({category: MappingProxyType(models) for category, models in v.items()})

    @model_validator(mode="after")
    def warn_on_duplicates(self):
        seen: Dict[str, DeviceCategory] = {}
        for category, models in self.categories.items():
            for identifier, entry in models.items():
                if entry.name is None:
                    continue
                if identifier in seen and seen[identifier] != category:
                    _log.warning(
                        f"Identifier {identifier} listed under both "
                        f"{seen[identifier].value} and {category.value}; "
                        f"{seen[identifier].value} wins"
                    )
                else:
                    seen.setdefault(identifier, category)
        return self

    @classmethod
    def from_mapping(cls, data: Any) -> "MappingTable":
        """Build a table from the JSON document shape ``{category: {id: name}}``."""
        return cls(categories=data)

    @property
    def is_empty(self) -> bool:
        return not any(self.categories.values())

    def category_of(self, identifier: str) -> Optional[DeviceCategory]:
        for category, models in self.categories.items():
            entry = models.get(identifier)
            if entry is not None and entry.name is not None:
                return category
        return None

    def display_name(self, identifier: str) -> Optional[str]:
        for models in self.categories.values():
            entry = models.get(identifier)
            if entry is not None and entry.name is not None:
                return entry.name
        return None

    def icon_override(self, identifier: str) -> Optional[str]:
        for models in self.categories.values():
            entry = models.get(identifier)
            if entry is not None and entry.icon is not None:
                return entry.icon
        return None
