"""Component parameters — the named input and output slots of a component.

Each slot carries its volatile data: the items collected for an input, or the
per-iteration values a component wrote to an output during the last solution.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class ParamAccess(str, enum.Enum):
    ITEM = "item"
    LIST = "list"


class ParameterSide(str, enum.Enum):
    INPUT  = "input"
    OUTPUT = "output"


class Param:
    def __init__(
        self,
        name: str,
        nickname: str,
        description: str,
        access: ParamAccess = ParamAccess.ITEM,
        type_name: str = "generic",
        optional: bool = False,
        default: Any = None,
    ) -> None:
        self.name        = name
        self.nickname    = nickname
        self.description = description
        self.access      = access
        self.type_name   = type_name
        self.optional    = optional
        self.default     = default
        self.mutable_nickname = True
        self.volatile_data: list[Any] = []

    def all_data(self) -> list[Any]:
        """Collected items, falling back to the default when nothing is wired in."""
        if self.volatile_data:
            return list(self.volatile_data)
        if self.default is not None:
            return [self.default]
        return []

    def empty_item(self) -> Any:
        """What an iteration that wrote nothing leaves behind."""
        return [] if self.access is ParamAccess.LIST else None

    def clear_data(self) -> None:
        self.volatile_data = []

    def __repr__(self) -> str:
        return f"<Param {self.name!r} ({self.access.value})>"


class ParamManager:
    """Ordered parameters for one side of a component."""

    def __init__(self, side: ParameterSide) -> None:
        self.side = side
        self._params: list[Param] = []

    def add_text_parameter(
        self,
        name: str,
        nickname: str,
        description: str,
        access: ParamAccess = ParamAccess.ITEM,
        default: Optional[str] = None,
        optional: bool = False,
    ) -> Param:
        param = Param(
            name, nickname, description,
            access=access, type_name="text", optional=optional, default=default,
        )
        self.register(param)
        return param

    def register(self, param: Param, index: Optional[int] = None) -> None:
        if index is None:
            self._params.append(param)
        else:
            self._params.insert(index, param)

    def unregister(self, param: Param) -> None:
        self._params.remove(param)

    def find(self, name: str) -> Optional[Param]:
        for param in self._params:
            if param.name == name:
                return param
        return None

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._params]

    def __getitem__(self, key: int | str) -> Param:
        if isinstance(key, str):
            param = self.find(key)
            if param is None:
                raise KeyError(key)
            return param
        return self._params[key]

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[Param]:
        return iter(list(self._params))


class ComponentParams:
    """Both parameter sides plus a change counter bumped on structural edits."""

    def __init__(self) -> None:
        self.input  = ParamManager(ParameterSide.INPUT)
        self.output = ParamManager(ParameterSide.OUTPUT)
        self.revision = 0

    def side(self, side: ParameterSide) -> ParamManager:
        return self.input if side is ParameterSide.INPUT else self.output

    def register_output_param(self, param: Param) -> None:
        self.output.register(param)

    def unregister_output_param(self, param: Param) -> None:
        self.output.unregister(param)

    def on_parameters_changed(self) -> None:
        self.revision += 1
        logger.debug("[params] parameters changed (revision=%d, outputs=%s)", self.revision, self.output.names)
