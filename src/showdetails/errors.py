"""Exceptions raised by the engine itself.

Failures of the collaborators (sources, operations) are not wrapped: they
travel to the caller unchanged inside a ShowError effect.
"""


class ShowDetailsError(Exception):
    """Base class for showdetails errors."""


class LoaderAccountingError(ShowDetailsError, RuntimeError):
    """remove_loader() was called without a matching add_loader()."""


class ConsumerActiveError(ShowDetailsError, RuntimeError):
    """An ActionQueue already has its one consumer."""
