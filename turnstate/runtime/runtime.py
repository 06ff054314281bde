# turnstate/runtime/runtime.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from turnstate.core.errors import DuplicateError
from turnstate.core.modules import Module
from turnstate.core.state import State
from turnstate.interfaces.types import ModuleName
from turnstate.persistence.serializer import SCHEDULE_KEY, STATE_KEY, Serializer
from turnstate.runtime.context import ExecutionContextStack
from turnstate.runtime.interface import Interface
from turnstate.runtime.scheduler import Scheduler
from turnstate.runtime.timers import TimeSource

logger = logging.getLogger(__name__)


class Runtime:
    """
    Owns a Scheduler, a State, the Interface handed to modules and the
    registry of modules. Hosts register their modules once and then call
    tick() on whatever cadence they like.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None, state: Optional[State] = None) -> None:
        """
        :param scheduler: Pending schedule; a fresh wall-clock one if omitted.
        :param state: Shared state store; an empty one if omitted.
        """
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._state = state if state is not None else State()
        self._context = ExecutionContextStack()
        self._interface = Interface(self._scheduler, self._state, self._context)
        self._modules: Dict[ModuleName, Module] = {}

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def state(self) -> State:
        return self._state

    @property
    def interface(self) -> Interface:
        return self._interface

    @property
    def context(self) -> ExecutionContextStack:
        return self._context

    @property
    def modules(self) -> Mapping[ModuleName, Module]:
        """Read-only view of the registered modules by name."""
        return MappingProxyType(self._modules)

    def register_module(self, definition: Any) -> Module:
        """
        Register a module and run its init, if it has one, in its own context.

        :param definition: A Module, a mapping or an object with a name; see
                           Module.from_definition.
        :return: The registered Module.
        :raises ValidationError: If the definition has no usable name.
        :raises DuplicateError: If a module with the same name is registered.
        """
        module = Module.from_definition(definition)

        if module.name in self._modules:
            raise DuplicateError(
                f"Attempted to register module '{module.name}' which was already registered",
                module.name,
            )

        self._modules[module.name] = module
        logger.debug("Registered module '%s' with functions %s", module.name, sorted(module.functions))

        if module.init is not None:
            with self._context.executing(module):
                module.init(self._interface)
        else:
            logger.warning("Module '%s' has no init function", module.name)

        return module

    def tick(self) -> bool:
        """
        Execute exactly one due scheduled call.

        Items that name an unknown module or function are logged and skipped,
        and the next due item is tried instead. Exceptions raised by the
        module function propagate once its context has been popped; the item
        is consumed either way.

        :return: True if a call was executed, False if nothing was due.
        """
        while True:
            item = self._scheduler.get_next()
            if item is None:
                return False

            module_name, function_name = item.split_id()
            module = self._modules.get(module_name)
            if module is None:
                logger.warning("Could not find module '%s' for scheduled item %s", module_name, item.id)
                continue

            function = module.get_function(function_name)
            if function is None:
                logger.warning("Could not find function %s", item.id)
                continue

            logger.debug("Dispatching %s", item.id)
            with self._context.executing(module):
                function(self._interface, item.data)
            return True

    def run_pending(self, limit: Optional[int] = None) -> int:
        """
        Call tick() until nothing is due or limit calls have executed.

        :return: The number of calls executed.
        """
        executed = 0
        while limit is None or executed < limit:
            if not self.tick():
                break
            executed += 1
        return executed

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the pending schedule and the state mapping."""
        return {
            SCHEDULE_KEY: self._scheduler.export_snapshot(),
            STATE_KEY: self._state.export_snapshot(),
        }

    def to_snapshot(self) -> str:
        """
        Snapshot as JSON text.

        :raises SnapshotError: If state or item data is not JSON encodable.
        """
        return Serializer().dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any], clock: Optional[TimeSource] = None) -> "Runtime":
        """
        Build a runtime from a snapshot mapping. The result has no modules
        and no triggers; the host registers its modules again.

        :raises SnapshotError: If the mapping has the wrong shape.
        """
        snapshot = Serializer().validate(data)
        scheduler = Scheduler(snapshot[SCHEDULE_KEY], clock=clock)
        state = State(snapshot[STATE_KEY])
        logger.debug("Restored runtime with %d pending items and %d state keys", len(scheduler), len(state))
        return cls(scheduler, state)

    @classmethod
    def from_snapshot(cls, text: str, clock: Optional[TimeSource] = None) -> "Runtime":
        """
        Build a runtime from snapshot text produced by to_snapshot().

        :raises SnapshotError: If the text cannot be decoded.
        """
        return cls.from_dict(Serializer().loads(text), clock=clock)

    def __contains__(self, name: object) -> bool:
        return name in self._modules
