"""Status codes, line deltas and repository descriptors gathered from git."""

from .index import CLEAN, BatchIndex, EmptyIndex, PerFileIndex, StatusIndex, StatusRecord, build_status_index
from .numstat import NO_DELTA, LineDelta, ModeChange, Scope, summarize
from .repository import RepositoryDescriptor, describe

__all__ = [
    "CLEAN",
    "NO_DELTA",
    "BatchIndex",
    "EmptyIndex",
    "LineDelta",
    "ModeChange",
    "PerFileIndex",
    "RepositoryDescriptor",
    "Scope",
    "StatusIndex",
    "StatusRecord",
    "build_status_index",
    "describe",
    "summarize",
]
