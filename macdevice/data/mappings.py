import json
import logging
import threading
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from macdevice.core.exceptions import MappingTableError
from macdevice.data.device_types import MappingTable

mappings_logger = logging.getLogger("macdevice.data.mappings")

BUNDLED_MAPPINGS_PATH = Path(__file__).resolve().parent / "MacDeviceMappings.json"


def _read_mappings(path: Path) -> MappingTable:
    """
    Read and validate a mapping table file.

    Raises:
        MappingTableError: if the file is missing, unreadable, not JSON,
        or not shaped like ``{category: {identifier: name}}``.
    """
    if not path.exists():
        raise MappingTableError(f"Mapping table not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise MappingTableError(f"Could not read mapping table {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise MappingTableError(f"Invalid JSON in mapping table {path}: {e}") from e

    try:
        return MappingTable.from_mapping(raw)
    except ValidationError as e:
        raise MappingTableError(
            f"Malformed mapping table {path}: {e.error_count()} validation error(s)"
        ) from e


def load_mapping_table(path: Union[str, Path, None] = None) -> MappingTable:
    """
    Load the device mapping table, falling back to an empty table.

    Args:
        path: Alternate JSON file. If None, the table bundled with the
              package is used.

    Returns:
        MappingTable: the validated table, or an empty one on any failure.
    """
    table_path = Path(path) if path else BUNDLED_MAPPINGS_PATH
    try:
        table = _read_mappings(table_path)
    except MappingTableError as e:
        mappings_logger.warning(f"{e}; continuing with an empty mapping table")
        return MappingTable()

    mappings_logger.debug(
        f"Loaded {sum(len(m) for m in table.categories.values())} model entries "
        f"in {len(table.categories)} categories from {table_path}"
    )
    return table


class MappingTableLoader:
    """Loads the mapping table once, on first use, and memoizes it."""

    def __init__(self, path: Union[str, Path, None] = None):
        self._path = path
        self._table: Optional[MappingTable] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._table is not None

    def get(self) -> MappingTable:
        table = self._table
        if table is not None:
            return table
        with self._lock:
            if self._table is None:
                self._table = load_mapping_table(self._path)
            return self._table

    @classmethod
    def from_table(cls, table: MappingTable) -> "MappingTableLoader":
        """Wrap an already-built table, mostly useful in tests and embedding."""
        loader = cls()
        loader._table = table
        return loader
