"""Shared test doubles: re-export memory backends."""

from __future__ import annotations

from aionxml.persistence.memory_backend import MemoryCacheBackend, MemoryMetadataStore

__all__ = ["MemoryCacheBackend", "MemoryMetadataStore"]
