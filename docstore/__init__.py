"""Schema-less document store over a relational table.

Documents are JSON values stored one per row and addressed with dot-path keys
(``"user.settings.theme"``): the first segment names the row, the remainder
walks properties inside the decoded document.
"""

from .core.registry import Registry
from .core.store import DocumentStore
from .db.connection import ConnectionPool
from .errors import ConnectivityError, InvalidOperand, StoreError

__all__ = [
    "ConnectionPool",
    "ConnectivityError",
    "DocumentStore",
    "InvalidOperand",
    "Registry",
    "StoreError",
]
