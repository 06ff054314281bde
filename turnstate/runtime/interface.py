# turnstate/runtime/interface.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional

from turnstate.core.errors import ContextError
from turnstate.core.modules import Module
from turnstate.core.state import State
from turnstate.interfaces.types import FunctionRef, Priority, StateKey, Timestamp, TriggerCallback
from turnstate.runtime.context import ExecutionContextStack
from turnstate.runtime.scheduler import Scheduler


class _Trigger(NamedTuple):
    owner: Module
    callback: TriggerCallback


class TriggerRegistry:
    """
    Maps state keys to the callbacks subscribed to them, in registration
    order. Append-only; subscriptions live as long as the runtime does and
    are never persisted.
    """

    def __init__(self) -> None:
        self._triggers: Dict[StateKey, List[_Trigger]] = {}

    def add(self, key: StateKey, owner: Module, callback: TriggerCallback) -> None:
        self._triggers.setdefault(key, []).append(_Trigger(owner, callback))

    def get(self, key: StateKey) -> List[_Trigger]:
        """Return a copy of the subscriptions for key."""
        return list(self._triggers.get(key, ()))

    def __len__(self) -> int:
        return sum(len(triggers) for triggers in self._triggers.values())


class Interface:
    """
    The only surface modules get to touch. Wraps the runtime's State and
    Scheduler, owns the trigger registry and checks the execution context
    before anything is written.
    """

    def __init__(self, scheduler: Scheduler, state: State, context: ExecutionContextStack) -> None:
        self._scheduler = scheduler
        self._state = state
        self._context = context
        self._triggers = TriggerRegistry()

    def get(self, key: StateKey) -> Any:
        """Return the value stored under key, or None."""
        return self._state.get(key)

    def set(self, key: StateKey, value: Any) -> None:
        """
        Store value under key, then run every trigger subscribed to key in
        registration order with (value, old_value). Each trigger runs in the
        context of the module that registered it.

        Triggers may set keys themselves. Nothing guards against triggers
        that keep setting each other's keys.

        :raises ContextError: If no module is executing.
        """
        if self._context.current() is None:
            raise ContextError("Attempted to change state outside of runtime", "set", {"key": key})

        old_value = self._state.get(key)
        self._state.set(key, value)

        for trigger in self._triggers.get(key):
            with self._context.executing(trigger.owner):
                trigger.callback(value, old_value)

    def add_trigger(self, key: StateKey, callback: TriggerCallback) -> None:
        """
        Subscribe callback to changes of key on behalf of the executing module.

        :raises ContextError: If no module is executing.
        """
        owner = self._context.current()
        if owner is None:
            raise ContextError("Cannot add triggers from outside a module", "add_trigger", {"key": key})
        self._triggers.add(key, owner, callback)

    def schedule(
        self,
        function_ref: FunctionRef,
        delay: Timestamp = 0,
        priority: Priority = 0,
        expire_after: Optional[Timestamp] = None,
        data: Optional[Any] = None,
    ) -> None:
        """
        Schedule one of the executing module's functions, or a function by
        name. See Scheduler.schedule for the meaning of each option. The
        scheduled item itself stays private to the scheduler.
        """
        self._scheduler.schedule(
            self._context.current(),
            function_ref,
            delay=delay,
            priority=priority,
            expire_after=expire_after,
            data=data,
        )

    def now(self) -> Timestamp:
        """Current scheduler time in epoch milliseconds."""
        return self._scheduler.now()
