# turnstate/runtime/scheduler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Time and priority ordered scheduling of module function invocations.

Items are kept ascending by `when` so a scan can stop at the first item that
is not yet due. Selection among the due items is by priority, highest first,
with the earliest scanned item winning ties. Consumed and expired items are
tombstoned in place and only dropped when a snapshot is exported.
"""

from __future__ import annotations

import logging
from bisect import insort_right
from operator import attrgetter
from typing import Any, List, Optional

from turnstate.core.errors import ContextError, ResolutionError, ValidationError
from turnstate.core.items import ScheduleItem, is_number
from turnstate.core.modules import Module
from turnstate.interfaces.types import FunctionRef, Priority, ScheduleSnapshot, Timestamp
from turnstate.runtime.timers import SystemTimeSource, TimeSource

logger = logging.getLogger(__name__)

_by_when = attrgetter("when")


class Scheduler:
    """
    Holds the pending ScheduleItems of a runtime and hands them out one at a
    time through get_next().

    The pending set is scanned linearly; it is meant for a modest number of
    items, not for high-volume scheduling.
    """

    def __init__(self, schedule: Optional[ScheduleSnapshot] = None, clock: Optional[TimeSource] = None) -> None:
        """
        :param schedule: Items from a previously exported snapshot. They are
                         stable-sorted by `when` once on load.
        :param clock: Time source in epoch milliseconds; wall-clock if omitted.
        """
        self._clock = clock or SystemTimeSource()
        items = [ScheduleItem.from_dict(snapshot) for snapshot in schedule or []]
        self._items: List[ScheduleItem] = sorted(items, key=_by_when)

    @property
    def clock(self) -> TimeSource:
        return self._clock

    def now(self) -> Timestamp:
        return self._clock.now()

    def schedule(
        self,
        module: Optional[Module],
        function_ref: FunctionRef,
        delay: Timestamp = 0,
        priority: Priority = 0,
        expire_after: Optional[Timestamp] = None,
        data: Optional[Any] = None,
    ) -> ScheduleItem:
        """
        Enqueue one invocation on behalf of the executing module.

        :param module: The module currently executing, or None.
        :param function_ref: Either one of module's own callables, or a
                             function name. A bare name is qualified with
                             module's name; a dotted name is used as-is and
                             may point at another module. Names are only
                             resolved when the item fires.
        :param delay: Milliseconds from now until the item is due.
        :param priority: Higher values are selected first among due items.
        :param expire_after: Milliseconds after `when` at which the item
                             expires unexecuted. None means never.
        :param data: Payload handed to the function when it runs.
        :return: The new item.
        :raises ContextError: If no module is executing.
        :raises ResolutionError: If a callable is not one of module's functions.
        :raises ValidationError: If delay, priority or expire_after is not a
            number, or delay or expire_after is negative.
        """
        if module is None:
            raise ContextError("Cannot schedule calls from outside a module", "schedule")

        item_id = self._resolve(module, function_ref)

        options = {"delay": delay, "priority": priority}
        if expire_after is not None:
            options["expire_after"] = expire_after
        for option, value in options.items():
            if not is_number(value):
                raise ValidationError(f"{option} must be a number, got {value!r}", {"id": item_id})

        if delay < 0:
            raise ValidationError(f"delay must not be negative, got {delay}", {"id": item_id})
        if expire_after is not None and expire_after < 0:
            raise ValidationError(f"expire_after must not be negative, got {expire_after}", {"id": item_id})

        when = self.now() + delay
        until = when + expire_after if expire_after is not None else None
        item = ScheduleItem(id=item_id, when=when, priority=priority, data=data, until=until)

        # Equal `when` values keep insertion order.
        insort_right(self._items, item, key=_by_when)
        logger.debug("Scheduled %s at %s (priority=%s, until=%s)", item.id, item.when, item.priority, item.until)
        return item

    def _resolve(self, module: Module, function_ref: FunctionRef) -> str:
        if isinstance(function_ref, str):
            if "." in function_ref:
                return function_ref
            return f"{module.name}.{function_ref}"

        if callable(function_ref):
            fn_name = module.find_function_name(function_ref)
            if fn_name is not None:
                return f"{module.name}.{fn_name}"

        raise ResolutionError(
            f"The specified function is not available in module '{module.name}'",
            module.name,
            function_ref,
        )

    def get_next(self) -> Optional[ScheduleItem]:
        """
        Select, tombstone and return the item to execute now, or None.

        Due items that have expired are tombstoned on the way without being
        returned. Among the remaining due items the highest priority wins;
        ties go to the earliest item in the scan.
        """
        now = self.now()
        selected: Optional[ScheduleItem] = None

        for item in self._items:
            if item.garbage:
                continue
            if not item.is_ready(now):
                break
            if item.is_expired(now):
                item.garbage = True
                logger.debug("Dropped expired item %s (until=%s, now=%s)", item.id, item.until, now)
                continue
            if selected is None or item.priority > selected.priority:
                selected = item

        if selected is not None:
            selected.garbage = True
            logger.debug("Selected item %s (priority=%s)", selected.id, selected.priority)
        return selected

    def pending(self) -> List[ScheduleItem]:
        """Return the non-tombstoned items in stored order."""
        return [item for item in self._items if not item.garbage]

    def export_snapshot(self) -> ScheduleSnapshot:
        """
        Return the non-tombstoned items, in stored order, in snapshot form.
        """
        return [item.to_dict() for item in self._items if not item.garbage]

    def __len__(self) -> int:
        return sum(1 for item in self._items if not item.garbage)
