# turnstate/persistence/serializer.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Snapshot text encoding and decoding.

A snapshot holds only data: the pending schedule and the state mapping.
Modules and their trigger subscriptions are code and are never written; a
host re-registers its modules after restoring a snapshot.

Snapshot shape:
    {
      "schedule": [{"id": "<module>.<function>", "priority": 0, "when": 0,
                    "data": ..., "until": ...}, ...],
      "state": {"<key>": ..., ...}
    }
"""

from __future__ import annotations

import json
from typing import Any, Dict

from turnstate.core.errors import SnapshotError

SCHEDULE_KEY = "schedule"
STATE_KEY = "state"


class Serializer:
    """
    Converts runtime snapshot mappings to and from JSON text.
    """

    def dumps(self, snapshot: Dict[str, Any]) -> str:
        """
        Encode a snapshot mapping as JSON text.

        :raises SnapshotError: If state or item data is not JSON encodable.
        """
        try:
            return json.dumps(snapshot)
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"Snapshot is not JSON encodable: {e}")

    def loads(self, text: str) -> Dict[str, Any]:
        """
        Decode JSON text into a snapshot mapping with "schedule" and "state".
        A missing section decodes as empty.

        :raises SnapshotError: If the text is not JSON or has the wrong shape.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"Snapshot is not valid JSON: {e}")

        return self.validate(data)

    def validate(self, data: Any) -> Dict[str, Any]:
        """
        Check the top-level shape of a decoded snapshot. Item and value
        contents are not inspected here.

        :raises SnapshotError: If a section has the wrong container type.
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot must be an object, got {type(data).__name__}")

        # Absent and null sections read as empty.
        schedule = data.get(SCHEDULE_KEY)
        if schedule is None:
            schedule = []
        state = data.get(STATE_KEY)
        if state is None:
            state = {}

        if not isinstance(schedule, list):
            raise SnapshotError(f"Snapshot '{SCHEDULE_KEY}' must be a list", {"section": SCHEDULE_KEY})
        if not isinstance(state, dict):
            raise SnapshotError(f"Snapshot '{STATE_KEY}' must be an object", {"section": STATE_KEY})

        return {SCHEDULE_KEY: schedule, STATE_KEY: state}
