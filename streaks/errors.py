"""Exception hierarchy for the streak engine and its data sources."""

from typing import Any


class StreakEngineError(Exception):
    """Base error for anything the engine reports back to a caller."""

    def __init__(self, message: str, stage: str = "engine"):
        super().__init__(message)
        self.stage = stage


class InvalidParameterError(StreakEngineError, ValueError):
    """A request parameter is outside its allowed domain."""

    def __init__(self, parameter: str, value: Any, reason: str, stage: str = "validate"):
        super().__init__(f"Invalid {parameter}={value!r}: {reason}", stage=stage)
        self.parameter = parameter
        self.value = value


class UpstreamUnavailableError(StreakEngineError):
    """The event log source failed to return data."""

    def __init__(self, message: str, stage: str = "fetch"):
        super().__init__(message, stage=stage)
