# turnstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Dict, List, Union

ModuleName = str
FunctionName = str
ItemID = str
StateKey = str
Timestamp = int
Priority = Union[int, float]

# Callback Types
ModuleFunction = Callable[..., None]
InitFunction = Callable[[Any], None]
TriggerCallback = Callable[[Any, Any], None]
FunctionRef = Union[str, ModuleFunction]

# Snapshot Types
ItemSnapshot = Dict[str, Any]
ScheduleSnapshot = List[ItemSnapshot]
StateSnapshot = Dict[StateKey, Any]
