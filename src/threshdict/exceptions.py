from typing import Any


class ThresholdDictException(Exception):
    """
    Base exception class.

    All threshdict-specific exceptions should subclass this class.
    """


class InvalidKeyError(ThresholdDictException):
    """
    Raised when a key cannot be ordered against the other keys, e.g. a NaN
    or a value of an incomparable type.
    """

    def __init__(self, key: Any, description: str) -> None:
        self.key = key
        super().__init__(f"{self.__class__.__name__}: {description}")
