# turnstate/core/modules.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from turnstate.core.errors import ValidationError
from turnstate.interfaces.types import FunctionName, InitFunction, ModuleFunction, ModuleName

_RESERVED = ("name", "init")


@dataclass(eq=False)
class Module:
    """
    A named unit of domain logic. `functions` maps the names that scheduled
    items refer to onto the callables that run for them; it is frozen once
    the module is built.
    """

    name: ModuleName
    functions: Mapping[FunctionName, ModuleFunction] = field(default_factory=dict)
    init: Optional[InitFunction] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise ValidationError(
                f"A module must expose a string name, got {type(self.name).__name__}",
                {"name": self.name},
            )
        if not self.name or "." in self.name:
            raise ValidationError(
                f"Module name {self.name!r} must be non-empty and must not contain '.'",
                {"name": self.name},
            )
        if self.init is not None and not callable(self.init):
            raise ValidationError(f"init of module '{self.name}' is not callable", {"name": self.name})
        for fn_name, fn in self.functions.items():
            if not callable(fn):
                raise ValidationError(
                    f"Function '{fn_name}' of module '{self.name}' is not callable",
                    {"name": self.name, "function": fn_name},
                )
        self.functions = MappingProxyType(dict(self.functions))

    def get_function(self, name: FunctionName) -> Optional[ModuleFunction]:
        return self.functions.get(name)

    def find_function_name(self, fn: Any) -> Optional[FunctionName]:
        """
        Reverse lookup of a callable in this module's function mapping.
        Equality is used rather than identity so bound methods, which are
        created afresh on each attribute access, still resolve.

        :return: The registered name, or None if fn is not one of ours.
        """
        for fn_name, candidate in self.functions.items():
            if candidate == fn:
                return fn_name
        return None

    @classmethod
    def from_definition(cls, definition: Any) -> "Module":
        """
        Build a Module from a host-supplied definition:

        - a Module is returned unchanged;
        - a mapping supplies "name", an optional "init" and any other
          callable entries as functions;
        - any other object supplies a `name` attribute, an optional `init`
          and its public callable attributes as functions.

        :raises ValidationError: If the name is missing or not a string, or an
            attribute of an object definition cannot be read.
        """
        if isinstance(definition, Module):
            return definition

        if isinstance(definition, Mapping):
            members = dict(definition)
        else:
            members = {}
            for attr in dir(definition):
                if attr.startswith("_"):
                    continue
                try:
                    members[attr] = getattr(definition, attr)
                except Exception as e:
                    raise ValidationError(
                        f"Could not read attribute '{attr}' of module definition: {e}",
                        {"definition": repr(definition), "attribute": attr},
                    ) from e

        if "name" not in members:
            raise ValidationError("A module must expose a name property", {"definition": repr(definition)})

        functions = {
            member: value for member, value in members.items() if member not in _RESERVED and callable(value)
        }
        return cls(name=members["name"], functions=functions, init=members.get("init"))
