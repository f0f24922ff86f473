"""Value objects exchanged with the upstream corpus scanner."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from aionxml.models.encoding import EncodingInfo


class CorpusFile(BaseModel):
    """One table file handed over by the scanner."""

    path: str
    table_name: str
    map_variant: str = ""
    loaded_by_server: bool = True
    error_count: int = 0


class FileEncodingOutcome(BaseModel):
    """Encoding decision for one CorpusFile."""

    path: str
    table_name: str
    map_variant: str = ""
    encoding: EncodingInfo
    confidence: int
    baseline_hash: Optional[str] = None
