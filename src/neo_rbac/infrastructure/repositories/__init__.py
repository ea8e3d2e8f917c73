"""Directory Store implementations."""

from .memory_directory import InMemoryDirectoryStore

__all__ = ["InMemoryDirectoryStore"]
