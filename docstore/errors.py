"""Exceptions raised by the document store."""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base class for document store errors."""


class ConnectivityError(StoreError):
    """Raised when the backend cannot be reached or no connection is available."""


class InvalidOperand(StoreError, ValueError):
    """Raised when ``add``/``subtract`` receive a value that is not a number.

    ``operand`` holds the rejected value.
    """

    def __init__(self, operand: Any, operation: str = "add") -> None:
        super().__init__(f"Value to {operation} is not a number: {operand!r}")
        self.operand = operand
        self.operation = operation
