# turnstate/core/items.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from turnstate.core.errors import SnapshotError
from turnstate.interfaces.types import FunctionName, ItemID, ItemSnapshot, ModuleName, Priority, Timestamp


def is_number(value: Any) -> bool:
    """True for ints and floats. Booleans are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(eq=False)
class ScheduleItem:
    """A pending invocation of "<module>.<function>" at or after `when`."""

    id: ItemID
    when: Timestamp
    priority: Priority = 0
    data: Optional[Any] = None
    until: Optional[Timestamp] = None
    garbage: bool = False

    @property
    def module_name(self) -> ModuleName:
        return self.split_id()[0]

    @property
    def function_name(self) -> FunctionName:
        return self.split_id()[1]

    def split_id(self) -> Tuple[ModuleName, FunctionName]:
        """
        Split the id at its first dot. Module names never contain dots, so
        everything after the first one is the function name.
        """
        module_name, _, function_name = self.id.partition(".")
        return module_name, function_name

    def is_ready(self, now: Timestamp) -> bool:
        return self.when <= now

    def is_expired(self, now: Timestamp) -> bool:
        return self.until is not None and self.until < now

    def to_dict(self) -> ItemSnapshot:
        """
        Render the item in snapshot form. Absent optional fields are omitted
        and the tombstone flag is never written.
        """
        snapshot: ItemSnapshot = {"id": self.id, "priority": self.priority, "when": self.when}
        if self.data is not None:
            snapshot["data"] = self.data
        if self.until is not None:
            snapshot["until"] = self.until
        return snapshot

    @classmethod
    def from_dict(cls, snapshot: ItemSnapshot) -> "ScheduleItem":
        """
        Rebuild an item from its snapshot form. An absent or null priority
        reads as 0.

        :raises SnapshotError: If the mapping lacks an id or a when, or a
            field has the wrong type.
        """
        try:
            item_id = snapshot["id"]
            when = snapshot["when"]
            priority = snapshot.get("priority")
            until = snapshot.get("until")
            data = snapshot.get("data")
            garbage = bool(snapshot.get("garbage", False))
        except (KeyError, TypeError, AttributeError) as e:
            raise SnapshotError(f"Malformed schedule item {snapshot!r}: {e}", {"item": snapshot})

        if priority is None:
            priority = 0

        if not isinstance(item_id, str):
            raise SnapshotError(f"Schedule item id must be a string, got {item_id!r}", {"item": snapshot})
        for field, value in (("when", when), ("priority", priority)):
            if not is_number(value):
                raise SnapshotError(f"Schedule item {field} must be a number, got {value!r}", {"item": snapshot})
        if until is not None and not is_number(until):
            raise SnapshotError(f"Schedule item until must be a number, got {until!r}", {"item": snapshot})

        return cls(id=item_id, when=when, priority=priority, data=data, until=until, garbage=garbage)
