"""Database access layer for the document store.

This sub-package owns the connection pool and the row-level models so that the
document logic in :mod:`docstore.core` stays storage-agnostic.
"""
