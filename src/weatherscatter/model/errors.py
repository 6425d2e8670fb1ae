"""Exceptions raised by the model layer."""


class DataError(ValueError):
    """The input dataset is empty, or a record is missing a required field or holds an invalid value."""


class DomainError(ValueError):
    """A scale was requested over an empty or degenerate (min == max) domain."""
