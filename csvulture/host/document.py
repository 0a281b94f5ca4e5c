"""Document — owns components and runs solutions.

Solves every expired component in insertion order, one iteration per input
item (longest input wins, shorter inputs repeat their last item). Callbacks
scheduled during a pass run after it, then a fresh pass starts. That is the
only point where a component may restructure its own parameters.
Every output holds one item per iteration, an empty one where the
component wrote nothing, so items line up with the inputs that made them.

A failing component is marked FAILED with an error message; the pass carries
on with the next component. Nothing is retried.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from csvulture.config import Settings, get_settings
from csvulture.host.component import (
    Component,
    ComponentPhase,
    DataAccess,
    RuntimeMessageLevel,
)
from csvulture.errors import SolutionError
from csvulture.host.params import ParameterSide
from csvulture.host.state import StateStore
from csvulture.telemetry import record_solution_duration, traced

logger = logging.getLogger(__name__)

SolutionCallback = Callable[["Document"], None]


@dataclass
class ScheduledCallback:
    delay_ms: int
    callback: Optional[SolutionCallback]


@dataclass
class UndoEvent:
    name:           str
    instance_id:    str
    component_name: str
    output_names:   list[str]   # outputs as they were before the change
    recorded_at:    datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


class Document:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.components: list[Component] = []
        self.undo_events: list[UndoEvent] = []
        self.solution_count = 0
        self._undo_listeners: list[Callable[[UndoEvent], None]] = []
        self._scheduled: list[ScheduledCallback] = []
        self._solving = False
        self._recompute_requested = False

    # ──────────────────────────────────────────
    #  Components
    # ──────────────────────────────────────────

    def add_component(self, component: Component) -> Component:
        component.document = self
        component.expire_solution(False)
        self.components.append(component)
        return component

    def remove_component(self, component: Component) -> None:
        self.components.remove(component)
        component.document = None

    def find_component(self, instance_id: str) -> Optional[Component]:
        for component in self.components:
            if component.instance_id == instance_id:
                return component
        return None

    def set_input_data(self, component: Component, name: str, values: Any) -> None:
        """Wire data into an input. A list means one item per entry."""
        param = component.params.input[name]
        param.volatile_data = list(values) if isinstance(values, (list, tuple)) else [values]
        component.expire_solution(False)

    def insert_parameter(self, component: Component, side: ParameterSide, index: int) -> bool:
        """User action: add a parameter, if the component allows it."""
        if not component.can_insert_parameter(side, index):
            return False
        param = component.create_parameter(side, index)
        if param is None:
            return False
        component.params.side(side).register(param, index)
        component.params.on_parameters_changed()
        component.variable_parameter_maintenance()
        component.expire_solution(False)
        return True

    def remove_parameter(self, component: Component, side: ParameterSide, index: int) -> bool:
        """User action: remove a parameter, if the component allows it."""
        if not component.can_remove_parameter(side, index):
            return False
        if not component.destroy_parameter(side, index):
            return False
        manager = component.params.side(side)
        manager.unregister(manager[index])
        component.params.on_parameters_changed()
        component.variable_parameter_maintenance()
        component.expire_solution(False)
        return True

    # ──────────────────────────────────────────
    #  Undo notifications
    # ──────────────────────────────────────────

    def add_undo_listener(self, listener: Callable[[UndoEvent], None]) -> None:
        self._undo_listeners.append(listener)

    def record_undo_event(self, component: Component, name: str) -> UndoEvent:
        event = UndoEvent(
            name=name,
            instance_id=component.instance_id,
            component_name=component.NAME,
            output_names=component.params.output.names,
        )
        self.undo_events.append(event)
        logger.info(f"[document] undo event {name!r} for {component.NAME} ({component.instance_id})")
        for listener in self._undo_listeners:
            listener(event)
        return event

    # ──────────────────────────────────────────
    #  Solutions
    # ──────────────────────────────────────────

    def schedule_solution(self, delay_ms: int, callback: Optional[SolutionCallback] = None) -> None:
        """Run callback after the current pass, then solve again.

        Outside a solution there is no pass to wait for: the callback runs
        straight away and a solution follows.
        """
        if not self._solving:
            if callback is not None:
                callback(self)
            self.new_solution()
            return
        self._scheduled.append(ScheduledCallback(delay_ms, callback))
        logger.debug(f"[document] solution scheduled in {delay_ms}ms ({len(self._scheduled)} pending)")

    def new_solution(self) -> int:
        """Solve until nothing is scheduled. Returns the number of passes run.

        Raises SolutionError once max_solution_passes is reached with work still
        pending; the pending callbacks are dropped first.
        """
        if self._solving:
            self._recompute_requested = True
            return 0

        passes = 0
        self._solving = True
        try:
            while True:
                if passes >= self.settings.max_solution_passes:
                    dropped = len(self._scheduled)
                    self._scheduled = []
                    self._recompute_requested = False
                    logger.error(
                        f"[document] solution did not settle after {passes} passes, "
                        f"dropping {dropped} scheduled callback(s)"
                    )
                    raise SolutionError(passes, dropped)

                passes += 1
                self._solve_pass()

                if not self._scheduled and not self._recompute_requested:
                    break

                self._recompute_requested = False
                pending, self._scheduled = self._scheduled, []
                for item in pending:
                    if item.callback is not None:
                        item.callback(self)
        finally:
            self._solving = False

        return passes

    @traced("csvulture.document.solution")
    def _solve_pass(self) -> None:
        self.solution_count += 1
        t0 = time.perf_counter()

        for component in list(self.components):
            if component.phase is ComponentPhase.EXPIRED:
                self._solve_component(component)

        duration_ms = int((time.perf_counter() - t0) * 1000)
        record_solution_duration(duration_ms, len(self.components))
        logger.debug(f"[document] solution #{self.solution_count} done ({duration_ms}ms)")

    def _solve_component(self, component: Component) -> None:
        component.runtime_messages = []
        component.last_error = None
        for param in component.params.output:
            param.clear_data()

        collected = {p.name: p.all_data() for p in component.params.input}
        missing = [p.name for p in component.params.input if not p.optional and not collected[p.name]]
        if missing:
            for name in missing:
                component.add_runtime_message(
                    RuntimeMessageLevel.WARNING,
                    f"Input parameter {name} failed to collect data",
                )
            component.phase = ComponentPhase.COMPUTED
            return

        iterations = max((len(v) for v in collected.values()), default=0)
        try:
            for i in range(max(iterations, 1)):
                inputs = {name: (items[min(i, len(items) - 1)] if items else None)
                          for name, items in collected.items()}
                da = DataAccess(component, i, inputs)
                component.solve_instance(da)
                # One slot per iteration on every output, written or not
                for param in component.params.output:
                    param.volatile_data.append(da.outputs.get(param.name, param.empty_item()))
            component.phase = ComponentPhase.COMPUTED

        except Exception as exc:
            component.phase = ComponentPhase.FAILED
            component.last_error = exc
            component.add_runtime_message(RuntimeMessageLevel.ERROR, str(exc))
            for param in component.params.output:
                param.clear_data()
            logger.error(f"[document] {component.NAME} ({component.instance_id}) failed: {exc}")

    # ──────────────────────────────────────────
    #  Persistence
    # ──────────────────────────────────────────

    def write_state(self, store: StateStore) -> None:
        for component in self.components:
            values: dict[str, Any] = {}
            component.write(values)
            store.save(component.instance_id, str(component.COMPONENT_GUID), values)

    def read_state(self, store: StateStore) -> None:
        for component in self.components:
            component.read(store.load(component.instance_id))
            component.expire_solution(False)
