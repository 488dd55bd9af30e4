"""Dot-path addressing over decoded JSON documents.

A key is ``"<id>"`` or ``"<id>.<segment>.<segment>..."``. Segments are plain
property names: lists are treated as leaf values and never indexed into.
All helpers here are pure apart from the in-place edits documented on
:func:`assign_in` and :func:`remove_in`.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from docstore.db.models import ParsedKey


def parse_key(key: str) -> ParsedKey:
    """Split *key* on its first dot into the row id and the remaining path."""
    row_id, _, path = key.partition(".")
    return ParsedKey(id=row_id, path=path or None)


def get_in(document: Any, segments: Sequence[str]) -> Any:
    """Return the value found by walking *segments* into *document*.

    Walking stops with ``None`` as soon as the current value has no
    properties (missing, null, scalar or list).
    """
    current = document
    for segment in segments:
        if not isinstance(current, dict):
            return None
        current = current.get(segment)
    return current


def assign_in(document: Any, segments: Sequence[str], value: Any) -> Dict[str, Any]:
    """Set *value* at *segments*, creating intermediate objects on the way.

    A *document* that is not an object is replaced by a fresh ``{}``, as is
    every intermediate value that is not an object. Returns the (possibly new)
    root, which is modified in place.
    """
    if not segments:
        raise ValueError("assign_in requires at least one path segment")

    root: Dict[str, Any] = document if isinstance(document, dict) else {}
    ref = root
    for segment in segments[:-1]:
        child = ref.get(segment)
        if not isinstance(child, dict):
            child = {}
            ref[segment] = child
        ref = child
    ref[segments[-1]] = value
    return root


def remove_in(document: Any, segments: Sequence[str]) -> bool:
    """Delete the property at *segments* from *document* in place.

    Nothing is created: if the document or any intermediate value is not an
    object, or the final property is missing, the document is left untouched
    and ``False`` is returned.
    """
    if not segments or not isinstance(document, dict):
        return False

    ref = document
    for segment in segments[:-1]:
        child = ref.get(segment)
        if not isinstance(child, dict):
            return False
        ref = child

    last = segments[-1]
    if last not in ref:
        return False
    del ref[last]
    return True
