"""
Runtime package for scheduling and execution.

Architecture:
- Scheduler selects the next due item by time and priority
- ExecutionContextStack attributes work to the executing module
- Interface is the capability facade handed to modules
- Runtime registers modules and dispatches one item per tick
"""

from .context import ExecutionContextStack
from .interface import Interface, TriggerRegistry
from .runtime import Runtime
from .scheduler import Scheduler
from .timers import ManualTimeSource, SystemTimeSource, TimeSource

__all__ = [
    "ExecutionContextStack",
    "Interface",
    "TriggerRegistry",
    "Runtime",
    "Scheduler",
    "TimeSource",
    "SystemTimeSource",
    "ManualTimeSource",
]
