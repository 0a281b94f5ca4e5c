"""Component base class and the per-iteration data access object.

A component declares its parameters once, then the document calls
solve_instance() once per iteration with a DataAccess holding that
iteration's input items. Anything the component writes to the DataAccess
ends up in the output parameters' volatile data.
"""

from __future__ import annotations

import enum
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from csvulture.host.params import ComponentParams, Param, ParamManager, ParameterSide

if TYPE_CHECKING:
    from csvulture.host.document import Document


class RuntimeMessageLevel(str, enum.Enum):
    REMARK  = "remark"
    WARNING = "warning"
    ERROR   = "error"


class ComponentPhase(str, enum.Enum):
    EXPIRED  = "expired"
    COMPUTED = "computed"
    FAILED   = "failed"


@dataclass
class RuntimeMessage:
    level: RuntimeMessageLevel
    text:  str


@dataclass
class MenuItem:
    label:    str
    on_click: Callable[[], None]
    enabled:  bool = True
    checked:  bool = False

    def click(self) -> None:
        if self.enabled:
            self.on_click()


class DataAccess:
    """Inputs and outputs of a single solve_instance() call."""

    def __init__(self, component: "Component", iteration: int, inputs: dict[str, Any]) -> None:
        self.component = component
        self.iteration = iteration
        self._inputs   = inputs
        self.outputs: dict[str, Any] = {}

    def get_data(self, name: str) -> Any:
        return self._inputs.get(name)

    def set_data(self, name: str, value: Any) -> bool:
        if self.component.params.output.find(name) is None:
            return False
        self.outputs[name] = value
        return True

    def set_data_list(self, name: str, values: list[Any]) -> bool:
        """Append to this iteration's list for name; repeated calls accumulate."""
        if self.component.params.output.find(name) is None:
            return False
        self.outputs.setdefault(name, []).extend(values)
        return True


class Component(ABC):
    """Base for every component the document can solve.

    Subclasses MUST define:
    - NAME / NICKNAME / DESCRIPTION
    - CATEGORY / SUBCATEGORY : where the component is listed
    - COMPONENT_GUID : stable identity, never change it once released
    """

    NAME:        str = "Component"
    NICKNAME:    str = "Comp"
    DESCRIPTION: str = ""
    CATEGORY:    str = "CSVulture"
    SUBCATEGORY: str = "Data"
    COMPONENT_GUID: uuid.UUID = uuid.UUID(int=0)

    def __init__(self, instance_id: Optional[str] = None) -> None:
        self.instance_id = instance_id or str(uuid.uuid4())
        self.logger = logging.getLogger(f"csvulture.components.{self.NICKNAME.lower()}")
        self.params = ComponentParams()
        self.document: Optional["Document"] = None
        self.message: Optional[str] = None
        self.phase = ComponentPhase.EXPIRED
        self.runtime_messages: list[RuntimeMessage] = []
        self.last_error: Optional[Exception] = None

        self.register_input_params(self.params.input)
        self.register_output_params(self.params.output)

    # ── Definition ──

    @abstractmethod
    def register_input_params(self, manager: ParamManager) -> None:
        ...

    @abstractmethod
    def register_output_params(self, manager: ParamManager) -> None:
        ...

    @abstractmethod
    def solve_instance(self, da: DataAccess) -> None:
        ...

    # ── Variable parameters (fixed by default) ──

    def can_insert_parameter(self, side: ParameterSide, index: int) -> bool:
        return False

    def can_remove_parameter(self, side: ParameterSide, index: int) -> bool:
        return False

    def create_parameter(self, side: ParameterSide, index: int) -> Optional[Param]:
        return None

    def destroy_parameter(self, side: ParameterSide, index: int) -> bool:
        return False

    def variable_parameter_maintenance(self) -> None:
        pass

    # ── Runtime ──

    def add_runtime_message(self, level: RuntimeMessageLevel, text: str) -> None:
        message = RuntimeMessage(level, text)
        if message not in self.runtime_messages:
            self.runtime_messages.append(message)

    def messages(self, level: RuntimeMessageLevel) -> list[str]:
        return [m.text for m in self.runtime_messages if m.level is level]

    def on_ping_document(self) -> Optional["Document"]:
        return self.document

    def expire_solution(self, recompute: bool) -> None:
        self.phase = ComponentPhase.EXPIRED
        if recompute and self.document is not None:
            self.document.new_solution()

    def record_undo_event(self, name: str) -> None:
        if self.document is not None:
            self.document.record_undo_event(self, name)

    # ── Menu ──

    def menu_items(self) -> list[MenuItem]:
        menu: list[MenuItem] = []
        self.append_additional_menu_items(menu)
        return menu

    def append_additional_menu_items(self, menu: list[MenuItem]) -> None:
        pass

    # ── Persistence ──

    def write(self, values: dict[str, Any]) -> None:
        pass

    def read(self, values: dict[str, Any]) -> None:
        pass

    # ── Metadata ──

    @classmethod
    def info(cls) -> dict[str, Any]:
        return {
            "guid": str(cls.COMPONENT_GUID),
            "name": cls.NAME,
            "nickname": cls.NICKNAME,
            "description": cls.DESCRIPTION,
            "category": cls.CATEGORY,
            "subcategory": cls.SUBCATEGORY,
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.instance_id} {self.phase.value}>"
