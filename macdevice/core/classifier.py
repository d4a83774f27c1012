"""
Model identifier classification.

An identifier is looked up in the mapping table first. When the table has
no entry, a fixed cascade of rules takes over:

1. new-scheme identifiers ("Mac16,12") by generation and sub-model
2. legacy family prefixes ("MacBookPro18,1")
3. case-insensitive substring guesses
4. the raw identifier itself
"""
import functools
import logging
import re
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from macdevice.config.config import get as config_get
from macdevice.core.hardware import DEFAULT_TIMEOUT, battery_percent, model_identifier
from macdevice.data.device_types import DeviceCategory, DeviceReport, DeviceType, MappingTable
from macdevice.data.mappings import MappingTableLoader

_log = logging.getLogger("macdevice.core.classifier")

_NEW_SCHEME = re.compile(r"Mac([0-9]+),([0-9]+)")

# (sub-models, category) rules per generation, first match wins.
# None as the sub-model set matches anything left over.
#   Mac16,x = M4 generation (2024-2025)
#   Mac15,x = M3 generation (2023-2024)
#   Mac14,x = M2 generation (2022-2023)
_GENERATION_RULES: Dict[int, Tuple[Tuple[Optional[FrozenSet[int]], DeviceCategory], ...]] = {
    16: (
        (frozenset({12, 13}), DeviceCategory.MACBOOK_AIR),
        (frozenset({1, 2, 5, 6, 7, 8}), DeviceCategory.MACBOOK_PRO),
        (frozenset({10, 11}), DeviceCategory.MAC_MINI),
        # TODO: confirm the M4 Mac Studio sub-models. 13 is shadowed by the
        # MacBook Air rule above and never resolves to Mac Studio.
        (frozenset({13, 14, 15}), DeviceCategory.MAC_STUDIO),
    ),
    15: (
        (frozenset({12, 13}), DeviceCategory.MACBOOK_AIR),
        (None, DeviceCategory.MACBOOK_PRO),
    ),
    14: (
        (frozenset({2, 5}), DeviceCategory.MACBOOK_AIR),
        (frozenset({7, 9, 10}), DeviceCategory.MACBOOK_PRO),
        (frozenset({3, 12}), DeviceCategory.MAC_MINI),
        (None, DeviceCategory.MAC_STUDIO),
    ),
}

# Order matters: "MacBookPro" must be tried before "MacPro".
_LEGACY_PREFIXES: Tuple[Tuple[str, DeviceCategory], ...] = (
    ("MacBookPro", DeviceCategory.MACBOOK_PRO),
    ("MacBookAir", DeviceCategory.MACBOOK_AIR),
    ("Macmini", DeviceCategory.MAC_MINI),
    ("iMac", DeviceCategory.IMAC),
    ("MacStudio", DeviceCategory.MAC_STUDIO),
    ("MacPro", DeviceCategory.MAC_PRO),
)

# Order matters: "book" is tried before "pro".
_HEURISTIC_TOKENS: Tuple[Tuple[str, DeviceCategory], ...] = (
    ("air", DeviceCategory.MACBOOK_AIR),
    ("book", DeviceCategory.MACBOOK_PRO),
    ("mini", DeviceCategory.MAC_MINI),
    ("imac", DeviceCategory.IMAC),
    ("studio", DeviceCategory.MAC_STUDIO),
    ("pro", DeviceCategory.MAC_PRO),
)


def classify_by_generation(identifier: str) -> Optional[DeviceCategory]:
    """Classify a "Mac<generation>,<sub-model>" identifier, or return None."""
    match = _NEW_SCHEME.fullmatch(identifier)
    if not match:
        return None

    generation, sub_model = int(match.group(1)), int(match.group(2))
    for sub_models, category in _GENERATION_RULES.get(generation, ()):
        if sub_models is None or sub_model in sub_models:
            return category
    return None


def classify_by_prefix(identifier: str) -> Optional[DeviceCategory]:
    for prefix, category in _LEGACY_PREFIXES:
        if identifier.startswith(prefix):
            return category
    return None


def classify_by_heuristic(identifier: str) -> Optional[DeviceCategory]:
    lowered = identifier.lower()
    for token, category in _HEURISTIC_TOKENS:
        if token in lowered:
            return category
    return None


class DeviceClassifier:
    """
    Resolves model identifiers to device category, name, icon and battery flag.

    The classifier owns its mapping table loader and identifier resolver.
    Every query method takes an optional identifier; when it is omitted the
    resolver is asked for the host's identifier.
    """

    def __init__(
        self,
        loader: Optional[MappingTableLoader] = None,
        resolver: Optional[Callable[[], str]] = None,
        battery_reader: Optional[Callable[[], Optional[float]]] = None,
    ):
        self._loader = loader or MappingTableLoader()
        self._resolver = resolver or model_identifier
        self._battery_reader = battery_reader or battery_percent

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DeviceClassifier":
        """Build a classifier from a loaded configuration dictionary."""
        mappings_path = config_get(config, "mappings.path", "") or None
        override = config_get(config, "main.model", "") or None
        timeout = float(config_get(config, "resolver.timeout", DEFAULT_TIMEOUT))

        return cls(
            loader=MappingTableLoader(mappings_path),
            resolver=functools.partial(model_identifier, override, timeout=timeout),
        )

    @property
    def table(self) -> MappingTable:
        return self._loader.get()

    def _identifier(self, identifier: Optional[str]) -> str:
        if identifier is None:
            return self.model_identifier()
        return identifier

    def model_identifier(self) -> str:
        """The host identifier as seen by this classifier ("" if unavailable)."""
        return self._resolver() or ""

    def classify(self, identifier: Optional[str] = None) -> DeviceType:
        identifier = self._identifier(identifier)

        category = self.table.category_of(identifier)
        if category is not None:
            return DeviceType(identifier=identifier, category=category)

        category = classify_by_generation(identifier) or classify_by_prefix(identifier)
        if category is not None:
            return DeviceType(identifier=identifier, category=category)

        _log.warning(f"Unknown Mac model identifier: {identifier!r}")
        return DeviceType(identifier=identifier, category=classify_by_heuristic(identifier))

    def device_type_description(self, identifier: Optional[str] = None) -> str:
        """Category display string, or the raw identifier when nothing matched."""
        return self.classify(identifier).description

    def device_full_description(self, identifier: Optional[str] = None) -> str:
        """Marketing name from the table, else the category description."""
        identifier = self._identifier(identifier)
        name = self.table.display_name(identifier)
        if name is not None:
            return name
        return self.device_type_description(identifier)

    def device_icon_name(self, identifier: Optional[str] = None) -> str:
        identifier = self._identifier(identifier)
        icon = self.table.icon_override(identifier)
        if icon is not None:
            return icon
        return self.classify(identifier).icon

    def has_battery(self, identifier: Optional[str] = None) -> bool:
        return self.classify(identifier).has_battery

    def describe(self, identifier: Optional[str] = None) -> DeviceReport:
        """
        Build a full report for one identifier.

        The live battery level is only read when describing the host itself
        (no identifier passed) and the device is a portable.
        """
        from_host = identifier is None
        identifier = self._identifier(identifier)
        device_type = self.classify(identifier)
        table = self.table

        full_name = table.display_name(identifier)
        icon = table.icon_override(identifier)

        level = None
        if from_host and device_type.has_battery:
            level = self._battery_reader()

        return DeviceReport(
            identifier=identifier,
            category=device_type.description,
            full_name=full_name if full_name is not None else device_type.description,
            icon=icon if icon is not None else device_type.icon,
            has_battery=device_type.has_battery,
            battery_percent=level,
        )
