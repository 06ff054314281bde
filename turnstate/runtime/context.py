# turnstate/runtime/context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Execution context tracking: which module is currently running.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from turnstate.core.errors import ContextError
from turnstate.core.modules import Module


class ExecutionContextStack:
    """
    Tracks the module that is "currently executing". Every module-owned
    invocation (init, scheduled call, trigger callback) runs with its module
    pushed here, including nested re-entrant invocations.

    One stack is owned by each Runtime, so independent runtimes can share a
    process without seeing each other's modules.
    """

    def __init__(self) -> None:
        self._stack: List[Module] = []

    def push(self, module: Module) -> None:
        self._stack.append(module)

    def pop(self) -> Module:
        """
        Remove and return the top module.

        :raises ContextError: If no module is executing.
        """
        if not self._stack:
            raise ContextError("Cannot pop the execution context: no module is executing", "pop")
        return self._stack.pop()

    def current(self) -> Optional[Module]:
        """Return the executing module, or None outside of any module."""
        return self._stack[-1] if self._stack else None

    @contextmanager
    def executing(self, module: Module) -> Iterator[Module]:
        """
        Run a block with module pushed as the current context. The module is
        popped again even if the block raises.

        Example:
            with context.executing(module):
                module.init(interface)
        """
        self.push(module)
        try:
            yield module
        finally:
            self.pop()

    def __len__(self) -> int:
        return len(self._stack)
