"""
Error taxonomy for the reminder dispatch engine.

Each error is caught at the boundary of the operation that produced it and
turned into "skip this reminder" or "skip this tick", never propagated out of
the scheduler.
"""


class DispatchError(Exception):
    """Base class for dispatch engine errors."""


class StoreUnavailable(DispatchError):
    """The reminder store could not be read. Aborts the current tick."""


class WeatherLookupFailed(DispatchError):
    """Weather could not be retrieved for one reminder's city."""


class EmailDeliveryFailed(DispatchError):
    """The email transport rejected or failed to send one message."""
