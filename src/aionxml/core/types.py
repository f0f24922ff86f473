"""Type aliases used across aionxml."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

TableName = str
MapVariant = str
FileHash = str
FileSource = Path | str | bytes


class MetadataKey(NamedTuple):
    """Primary key of encoding metadata: one record per table and map variant."""

    table_name: TableName
    map_variant: MapVariant = ""

    @classmethod
    def of(cls, table_name: str, map_variant: str | None = "") -> MetadataKey:
        return cls(table_name, map_variant or "")

    def __str__(self) -> str:
        return f"{self.table_name}:{self.map_variant}"
