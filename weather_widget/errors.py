"""
Error taxonomy.

Only WeatherError and its subclasses reach the user, and only as the
controller's error state. Storage problems are recovered where they occur.
"""

USER_MESSAGE = "City not found. Please try again."
SAVE_FAILED_MESSAGE = "Could not save this search. Please try again."


class WeatherError(RuntimeError):
    """Raised for user-facing weather lookup failures."""
    pass


class NotFoundError(WeatherError):
    """The provider rejected a required call or sent a body we cannot read."""
    pass


class NetworkError(WeatherError):
    """The request could not be issued or completed."""
    pass


class MalformedStorageError(ValueError):
    """A stored list failed to parse."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Malformed value in storage slot {key!r}: {reason}")
        self.key = key


class NothingDisplayedError(LookupError):
    """An action needed the current record but none is displayed."""
    pass
