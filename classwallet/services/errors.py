"""
Errors raised by the service layer.

NotFoundError and InsufficientBalanceError subclass ValueError,
so callers that treat any rejected request as a ValueError keep
working; the API layer tells them apart for status codes.
"""


class NotFoundError(ValueError):
    """A student, teacher or transaction id did not resolve."""


class InsufficientBalanceError(ValueError):
    """A purchase would drive a student's balance below zero."""

    def __init__(self, balance, requested):
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient balance: available={balance}, "
            f"requested={requested}"
        )


class SessionRequiredError(Exception):
    """The action needs a logged-in teacher."""


class PollServerError(Exception):
    """The remote poll server rejected a write or could not be reached."""
