"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
of an in-flight call.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinct from the provider error taxonomy: cancellation is a caller
    decision, not a failure, so it is never classified or retried.
    """

__all__ = ["CancelledError"]
