class GenPoolError(Exception):
    """Base error for the pool generation pipeline."""


class NotFoundError(GenPoolError):
    """No InternalIP address could be found in the nodes data."""


class InvalidFormatError(GenPoolError):
    """An IP address does not have the dotted-quad shape."""
