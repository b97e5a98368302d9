"""Error types raised by the service layer.

Routers translate these into HTTP responses; services never build
HTTPExceptions themselves.
"""


class NotFoundError(ValueError):
    """A user, test, CV or recommendation required for a decision is absent."""


class SubmissionError(ValueError):
    """Malformed input rejected at a service boundary (test answers, uploads)."""


class PersistenceError(RuntimeError):
    """The store could not read or write; the unit of work was rolled back."""
