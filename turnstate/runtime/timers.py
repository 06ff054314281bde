# turnstate/runtime/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import time

from turnstate.interfaces.types import Timestamp


class TimeSource:
    """
    Abstract definition for obtaining the current time in epoch milliseconds.
    Allows custom time sources (e.g. simulated time) to be plugged into the
    scheduler.
    """

    def now(self) -> Timestamp:
        raise NotImplementedError()


class SystemTimeSource(TimeSource):
    """
    Wall-clock time, in whole milliseconds since the epoch.
    """

    def now(self) -> Timestamp:
        return int(time.time() * 1000)


class ManualTimeSource(TimeSource):
    """
    A time source that only moves when told to. Useful for tests and for
    hosts that drive simulated time themselves.
    """

    def __init__(self, start: Timestamp = 0) -> None:
        """
        :param start: The initial reading, in milliseconds.
        """
        self._now = start

    def now(self) -> Timestamp:
        return self._now

    def advance(self, ms: Timestamp) -> Timestamp:
        """
        Move time forward by ms milliseconds and return the new reading.

        :raises ValueError: If ms is negative.
        """
        if ms < 0:
            raise ValueError(f"Cannot move time backwards by {ms}ms")
        self._now += ms
        return self._now

    def set(self, now: Timestamp) -> None:
        """Jump to an absolute reading."""
        self._now = now
