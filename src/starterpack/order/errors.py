"""Order lifecycle errors.

Each one is a validation failure local to a single order. Callers surface the
message and may re-fetch the order before retrying.
"""

from protean.exceptions import ValidationError


class InvalidTransition(ValidationError):
    """A fulfillment stage change that skips ahead, goes back, or precedes payment."""


class AlreadySettled(ValidationError):
    """A settlement recorded against a payment that is already completed or failed."""


class InvalidState(ValidationError):
    """An operation attempted before the order reached the stage it requires."""


class StaleRead(ValidationError):
    """The order changed since the caller last read it."""
