"""Errors raised by the commerce context on top of Protean's own exceptions.

Field-level checkout validation uses ``protean.exceptions.ValidationError``
directly; the classes below narrow it where callers need to tell cases apart.
"""

from protean.exceptions import ValidationError


class TransitionPreconditionError(ValidationError):
    """A status change request is missing something the target status needs."""


class BulkOperationError(ValidationError):
    """A bulk status update was rejected as a whole.

    Carries a single batch-level message and no per-order detail.
    """

    def __init__(self, message="Bulk status update rejected; no orders were changed"):
        super().__init__({"order_ids": [message]})


class SubmissionError(Exception):
    """The backing store failed while materializing an order."""

    def __init__(self, message="We could not place your order. Please try again."):
        self.message = message
        super().__init__(message)
