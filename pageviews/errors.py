class CounterError(Exception):
    """Base class for pageviews errors"""


class StoreNotInitializedError(CounterError):
    """Raised when the counter store is used before initialize()"""


class StoreAlreadyInitializedError(CounterError):
    """Raised when initialize() is called twice without close_store()"""
