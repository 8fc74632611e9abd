# src/fcrepo_ref_server/infra/providers.py
from __future__ import annotations

import logging
from typing import Optional
from fcrepo_ref_server.config import settings
from fcrepo_ref_server.ports.storage import RepositoryStore
from .memory_storage import MemoryStore

logger = logging.getLogger(__name__)

# singletons per-process
_memory: Optional[MemoryStore] = None


def get_storage() -> RepositoryStore:
    """
    Adapter selector. Default: in-memory for dev.
    Set FCREPO_STORAGE=<backend> to switch when real adapters are available.
    """
    global _memory
    backend = settings.STORAGE_BACKEND.lower()

    if _memory is None:
        if backend not in ("", "memory", "mem", "inmemory", "in-memory"):
            # Unknown backend → safe dev default
            logger.warning("Unknown storage backend %r, falling back to memory", backend)
        _memory = MemoryStore()
    return _memory
