"""turnstate: deterministic runtime for turn-based simulations

Independent modules register named functions, share a keyed state store,
subscribe to state changes and schedule future calls of their functions with
delay, priority and expiration. A host drives the runtime by calling
Runtime.tick() repeatedly.

Responsibilities:
    - Module registration and init
    - Priority and time ordered scheduling
    - Capability-scoped access to shared state
    - Trigger notification on state changes
    - Snapshot export and import

Cross-cutting Concerns:
    Thread Safety:
        - Single-threaded; a Runtime must not be ticked from several threads

    Error Handling:
        - Structured error hierarchy rooted at TurnStateError
        - Stale scheduled references are logged and skipped, not raised

    Logging:
        - Standard library logging under the "turnstate" logger namespace
"""

from .core.errors import (
    ContextError,
    DuplicateError,
    ResolutionError,
    SnapshotError,
    TurnStateError,
    ValidationError,
)
from .core.items import ScheduleItem
from .core.modules import Module
from .core.state import State
from .runtime.interface import Interface
from .runtime.runtime import Runtime
from .runtime.scheduler import Scheduler
from .runtime.timers import ManualTimeSource, SystemTimeSource, TimeSource

__version__ = "0.1.0"

__all__ = [
    "Runtime",
    "Scheduler",
    "State",
    "Interface",
    "Module",
    "ScheduleItem",
    "TimeSource",
    "SystemTimeSource",
    "ManualTimeSource",
    "TurnStateError",
    "ValidationError",
    "DuplicateError",
    "ContextError",
    "ResolutionError",
    "SnapshotError",
]
