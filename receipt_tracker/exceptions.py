"""Exceptions raised by the receipt tracker services."""


class DataAccessError(Exception):
    """The persistence layer was unreachable or rejected a query.

    Raised by the learned pattern store in place of the underlying SQLAlchemy
    error. Nothing retries; the caller decides whether to surface the failure
    or continue without learned categories.
    """


class ReceiptParseError(Exception):
    """The vision model response could not be turned into a receipt."""
