"""In-process dataflow host.

Just enough of a plugin host to run components: parameters, per-iteration
data access, runtime messages, deferred solutions, undo notifications and
key-value persistence.
"""

from csvulture.host.component import (
    Component,
    ComponentPhase,
    DataAccess,
    MenuItem,
    RuntimeMessage,
    RuntimeMessageLevel,
)
from csvulture.host.document import Document, UndoEvent
from csvulture.host.params import Param, ParamAccess, ParameterSide, ParamManager
from csvulture.host.state import MemoryStateStore, SqlStateStore, StateStore

__all__ = [
    "Component",
    "ComponentPhase",
    "DataAccess",
    "MenuItem",
    "RuntimeMessage",
    "RuntimeMessageLevel",
    "Document",
    "UndoEvent",
    "Param",
    "ParamAccess",
    "ParameterSide",
    "ParamManager",
    "StateStore",
    "MemoryStateStore",
    "SqlStateStore",
]
