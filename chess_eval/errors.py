"""
Exceptions raised by the engine supervisor and its collaborators.

Hierarchy:
    EngineError
    ├── InvalidInputError        malformed or illegal FEN
    ├── EngineBusyError          idle-only operation while analysing
    ├── NotEvaluatingError       polling an idle supervisor
    ├── EngineUnavailableError   supervisor needs a respawn
    │   └── EngineCrashedError   engine pipe broke or process exited
    └── EngineTimeoutError       no readyok within the configured timeout
"""


class EngineError(Exception):
    """Base class for all errors raised by chess_eval."""


class InvalidInputError(EngineError, ValueError):
    """The position string could not be parsed or is not a legal position."""


class EngineBusyError(EngineError):
    """The engine is busy evaluating a position."""

    def __init__(self, message: str = "Engine is busy evaluating a position."):
        super().__init__(message)


class NotEvaluatingError(EngineError):
    """The engine is not evaluating any position."""

    def __init__(self, message: str = "Engine is not evaluating."):
        super().__init__(message)


class EngineUnavailableError(EngineError):
    """The engine process is gone and must be respawned before further use."""


class EngineCrashedError(EngineUnavailableError):
    """Reading from or writing to the engine process failed."""


class EngineTimeoutError(EngineError, TimeoutError):
    """The engine did not answer in time."""
