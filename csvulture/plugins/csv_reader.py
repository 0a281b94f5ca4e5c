"""Read CSV — one output per column (or per row) of a delimited source.

Outputs are not fixed: on the first iteration of every solution the component
parses all upstream sources, collects the first cell of each column as the
output names, and compares them with its current outputs. When they differ it
asks the document to run a callback after the pass that adds, removes and
renames outputs, then solves again. Emission only happens once the outputs
match.

Inputs:
    CSV Path (C)   file path or raw delimited text
    Delimiter (D)  single character, comma by default

Menu:
    Outputs By Row  toggle between column mode (default) and row mode
"""

from __future__ import annotations

import enum
import uuid
from typing import Any, Optional

from csvulture.config import Settings, get_settings
from csvulture.host.component import (
    Component,
    DataAccess,
    MenuItem,
    RuntimeMessageLevel,
)
from csvulture.host.document import Document
from csvulture.host.params import Param, ParamAccess, ParameterSide, ParamManager
from csvulture.models.sources import InlineText, classify_source
from csvulture.services.delimited import Table, load_table, normalize_delimiter, unique_identifiers


class ReconcileState(str, enum.Enum):
    IN_SYNC                  = "in_sync"
    MISMATCHED               = "mismatched"
    RECONCILIATION_SCHEDULED = "reconciliation_scheduled"


class CSVReader(Component):
    NAME        = "Read CSV"
    NICKNAME    = "CSV"
    DESCRIPTION = "Read data from a .CSV file."
    CATEGORY    = "CSVulture"
    SUBCATEGORY = "Data"
    COMPONENT_GUID = uuid.UUID("396e2d79-86a3-4d60-b6e0-b72d8b1bd12c")

    SOURCE_INPUT    = "CSV Path"
    DELIMITER_INPUT = "Delimiter"
    ROWS_KEY        = "rows"
    UNDO_NAME       = "Output update from CSV change"

    def __init__(self, instance_id: Optional[str] = None, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.row_mode = False
        self.unique_column_names: list[str] = []
        self.reconcile_state = ReconcileState.IN_SYNC
        super().__init__(instance_id)
        self._update_message()

    # ──────────────────────────────────────────
    #  Parameters
    # ──────────────────────────────────────────

    def register_input_params(self, manager: ParamManager) -> None:
        manager.add_text_parameter(self.SOURCE_INPUT, "C", "The CSV filepath or raw data")
        manager.add_text_parameter(
            self.DELIMITER_INPUT, "D",
            "The character to use as a delimiter — comma by default",
            default=self.settings.default_delimiter,
        )

    def register_output_params(self, manager: ParamManager) -> None:
        # Outputs are created from the parsed data, see auto_create_outputs()
        pass

    # ──────────────────────────────────────────
    #  Menu
    # ──────────────────────────────────────────

    def append_additional_menu_items(self, menu: list[MenuItem]) -> None:
        menu.append(MenuItem("Outputs By Row", self._toggle_row_mode, enabled=True, checked=self.row_mode))

    def _toggle_row_mode(self) -> None:
        self.row_mode = not self.row_mode
        self._update_message()
        self.logger.info(f"[csv_reader] switched to {self.message.lower()} mode")
        self.expire_solution(True)

    def _update_message(self) -> None:
        self.message = "Rows" if self.row_mode else "Columns"

    # ──────────────────────────────────────────
    #  Solving
    # ──────────────────────────────────────────

    def solve_instance(self, da: DataAccess) -> None:
        source_value = da.get_data(self.SOURCE_INPUT) or ""
        delimiter = normalize_delimiter(da.get_data(self.DELIMITER_INPUT), self.settings.default_delimiter)

        if da.iteration == 0:
            # Names come from every upstream item; emission below only reads the current one
            upstream = [v for v in self.params.input[self.SOURCE_INPUT].all_data() if isinstance(v, str)]
            self.unique_column_names = []
            if not upstream:
                return
            self._remark_missing_files(upstream, delimiter)
            self.unique_column_names = unique_identifiers(self._load(v, delimiter) for v in upstream)

        if not self.unique_column_names:
            self.add_runtime_message(RuntimeMessageLevel.WARNING, "No valid columns found")
            return

        if self.output_mismatch():
            if da.iteration == 0:
                self.reconcile_state = ReconcileState.MISMATCHED
                self._schedule_reconciliation()
            return

        self.reconcile_state = ReconcileState.IN_SYNC
        for row in self._load(source_value, delimiter):
            if not row:
                continue
            name, values = row[0], row[1:]
            if not da.set_data_list(name, values):
                self.logger.debug(f"[csv_reader] no output named {name!r}, row skipped")

    def _remark_missing_files(self, values: list[str], delimiter: str) -> None:
        for value in dict.fromkeys(values):
            source = classify_source(value)
            if isinstance(source, InlineText) and source.looks_like_path(delimiter):
                self.add_runtime_message(
                    RuntimeMessageLevel.REMARK,
                    f"No file at {value.strip()!r}, reading the text itself as data",
                )

    def _load(self, value: str, delimiter: str) -> Table:
        return load_table(
            classify_source(value),
            delimiter=delimiter,
            row_mode=self.row_mode,
            trim_whitespace=self.settings.trim_whitespace,
            encoding=self.settings.source_encoding,
        )

    def _schedule_reconciliation(self) -> None:
        document: Optional[Document] = self.on_ping_document()
        if document is None:
            self.logger.warning("[csv_reader] outputs out of date but no document to schedule on")
            return
        document.schedule_solution(
            self.settings.schedule_delay_ms,
            lambda doc: self.auto_create_outputs(recompute=False),
        )
        self.reconcile_state = ReconcileState.RECONCILIATION_SCHEDULED
        self.logger.debug(f"[csv_reader] output reconciliation scheduled for {self.unique_column_names}")

    # ──────────────────────────────────────────
    #  Output reconciliation
    # ──────────────────────────────────────────

    def output_mismatch(self) -> bool:
        return self.params.output.names != self.unique_column_names

    def auto_create_outputs(self, recompute: bool) -> None:
        token_count = len(self.unique_column_names)
        if token_count == 0:
            return
        if not self.output_mismatch():
            return

        self.record_undo_event(self.UNDO_NAME)
        outputs = self.params.output
        while len(outputs) < token_count:
            self.params.register_output_param(self.create_parameter(ParameterSide.OUTPUT, len(outputs)))
        while len(outputs) > token_count:
            self.params.unregister_output_param(outputs[len(outputs) - 1])

        self.params.on_parameters_changed()
        self.variable_parameter_maintenance()
        self.logger.info(f"[csv_reader] outputs updated to {outputs.names}")
        self.expire_solution(recompute)

    def can_insert_parameter(self, side: ParameterSide, index: int) -> bool:
        return False

    def can_remove_parameter(self, side: ParameterSide, index: int) -> bool:
        return False

    def create_parameter(self, side: ParameterSide, index: int) -> Param:
        return Param("", "", "", access=ParamAccess.LIST)

    def destroy_parameter(self, side: ParameterSide, index: int) -> bool:
        return True

    def variable_parameter_maintenance(self) -> None:
        names = self.unique_column_names
        for i, param in enumerate(self.params.output):
            if i >= len(names):
                return
            param.name = names[i]
            param.nickname = names[i]
            param.description = f"Data from column: {names[i]}"
            param.mutable_nickname = False
            param.access = ParamAccess.LIST

    # ──────────────────────────────────────────
    #  Persistence
    # ──────────────────────────────────────────

    def write(self, values: dict[str, Any]) -> None:
        values[self.ROWS_KEY] = self.row_mode

    def read(self, values: dict[str, Any]) -> None:
        self.unique_column_names = []
        rows = values.get(self.ROWS_KEY)
        if isinstance(rows, bool):
            self.row_mode = rows
        self._update_message()
