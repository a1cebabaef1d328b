# File: promptly/models/errors.py
"""
Error types shared across Promptly.

Running out of room in a day is not an error; see SearchState.EXHAUSTED.
"""


class FormatError(ValueError):
    """Raised when a time or datetime string cannot be parsed."""

    def __init__(self, value, expected: str):
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid time value {value!r}: expected {expected}")


class TransportError(ConnectionError):
    """Raised when an Event Source or Preference Store call fails or times out."""

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
