# turnstate/core/state.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Dict, Optional

from turnstate.interfaces.types import StateKey, StateSnapshot


class State:
    """
    Keyed store shared by all modules of a runtime. Values are opaque to the
    runtime and are only ever overwritten, never removed.

    Authorization is left to the caller; modules reach this store through the
    Interface, which checks the execution context before writing.
    """

    def __init__(self, data: Optional[StateSnapshot] = None) -> None:
        """
        Create a store, optionally seeded from a previously exported snapshot.

        :param data: Mapping of key to value. Not validated.
        """
        self._data: Dict[StateKey, Any] = dict(data) if data else {}

    def get(self, key: StateKey) -> Any:
        """
        Return the value stored under key, or None when the key was never set.
        """
        return self._data.get(key)

    def set(self, key: StateKey, value: Any) -> None:
        """Overwrite the value stored under key."""
        self._data[key] = value

    def export_snapshot(self) -> StateSnapshot:
        """
        Return a shallow copy of the full key/value mapping.
        """
        return dict(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
