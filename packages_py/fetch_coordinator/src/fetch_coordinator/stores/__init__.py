"""
Store implementations for fetch_coordinator.
"""
from .memory import (
    NOT_FOUND,
    MemoryResponseCache,
    create_memory_response_cache,
)

__all__ = [
    "NOT_FOUND",
    "MemoryResponseCache",
    "create_memory_response_cache",
]
