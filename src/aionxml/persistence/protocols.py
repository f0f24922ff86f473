"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from aionxml.core.protocols import IBaselineStore, ICacheBackend, IMetadataStore

__all__ = ["IBaselineStore", "ICacheBackend", "IMetadataStore"]
