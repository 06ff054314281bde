"""
Core package providing the runtime's data records.

Architecture:
- State: keyed store shared by modules
- ScheduleItem: one pending invocation
- Module: a named set of functions with an optional init
- Error taxonomy used across the package
"""

from .errors import ContextError, DuplicateError, ResolutionError, SnapshotError, TurnStateError, ValidationError
from .items import ScheduleItem
from .modules import Module
from .state import State

__all__ = [
    "State",
    "ScheduleItem",
    "Module",
    "TurnStateError",
    "ValidationError",
    "DuplicateError",
    "ContextError",
    "ResolutionError",
    "SnapshotError",
]
