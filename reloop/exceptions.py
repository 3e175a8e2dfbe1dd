"""
Exceptions raised by the indexer.
"""


class ReloopError(Exception):
    """
    Base class for all indexer errors
    """


class ConfigurationError(ReloopError, ValueError):
    """
    A required setting (RPC url, database path) is missing
    """


class InvalidEventError(ReloopError):
    """
    An event payload violates a contract invariant
    (e.g. cascade depth doesn't match the split table).

    The event is not applied and the cursor doesn't advance.
    """
