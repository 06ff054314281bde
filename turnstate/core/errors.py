# turnstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, Optional


class TurnStateError(Exception):
    """
    Base exception class for errors raised by the turnstate runtime.

    :param message: Human readable description of the failure.
    :param details: Optional extra data describing the failure.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(TurnStateError):
    """
    Raised when a module definition or scheduling option is malformed.
    """


class DuplicateError(TurnStateError):
    """
    Raised when a module is registered under a name that is already taken.
    """

    def __init__(self, message: str, module_name: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.module_name = module_name


class ContextError(TurnStateError):
    """
    Raised when an operation that needs an executing module is called while
    no module is executing.
    """

    def __init__(self, message: str, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.operation = operation


class ResolutionError(TurnStateError):
    """
    Raised when a callable handed to schedule() is not one of the current
    module's own functions.
    """

    def __init__(
        self,
        message: str,
        module_name: Optional[str],
        function_ref: Any,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.module_name = module_name
        self.function_ref = function_ref


class SnapshotError(TurnStateError):
    """
    Raised when snapshot text cannot be decoded into a runtime snapshot.
    """
