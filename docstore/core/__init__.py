"""Document addressing and store operations."""

from .paths import assign_in, get_in, parse_key, remove_in
from .registry import Registry
from .store import DocumentStore

__all__ = ["DocumentStore", "Registry", "assign_in", "get_in", "parse_key", "remove_in"]
