#!/usr/bin/env python3
"""Peso Tracker TUI: record, review and back up weight entries in the terminal."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, Input, Label, Static

from pesotracker import (
    EntryStore,
    FilterPeriod,
    ImportFormatError,
    PersistenceError,
    WeightEntry,
    configure_logging,
    log_path,
    export_dir,
    filter_by_period,
    import_backup,
    open_store,
    parse_weight_input,
    summarize,
    today_str,
    validate_entry_input,
    workspace_root,
    write_export,
)

logger = logging.getLogger(__name__)

PERIOD_LABELS = {
    FilterPeriod.MONTH: "Last 30 days",
    FilterPeriod.THREE_MONTHS: "Last 90 days",
    FilterPeriod.YEAR: "Last year",
    FilterPeriod.ALL: "All",
}


CSS = """
#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    padding: 0 1;
}

#right-pane {
    width: 40;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

#entries-table {
    height: 1fr;
}

#summary {
    height: auto;
    padding: 1 2;
    margin: 1 0 0 0;
    border: tall $primary-background-darken-2;
}
"""


class PesoTrackerApp(App):
    """Peso Tracker: weight log with trend summary and backups."""

    TITLE = "Peso Tracker"
    CSS = CSS
    AUTO_FOCUS = "#weight-input"

    BINDINGS = [
        Binding("f2", "save_entry", "Save"),
        Binding("f3", "delete_entry", "Delete"),
        Binding("f4", "cycle_period", "Period"),
        Binding("f5", "export", "Export"),
        Binding("f6", "import_file", "Import"),
        Binding("escape", "blur_focus", "Back"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: EntryStore | None = None, root: Path | None = None) -> None:
        super().__init__()
        self._root = root
        self._store = store if store is not None else open_store(root)
        self._period = FilterPeriod.ALL
        self._entries: list[WeightEntry] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Entries", classes="section-title"),
                DataTable(id="entries-table", cursor_type="row"),
                id="left-pane",
            ),
            Vertical(
                Label("Entry", classes="section-title"),
                Input(value=today_str(self._root), placeholder="YYYY-MM-DD", id="date-input"),
                Input(placeholder="weight (kg), e.g. 82,5", id="weight-input"),
                Label("Import backup", classes="section-title"),
                Input(placeholder="path to .json or .csv", id="import-input"),
                Static(id="summary"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#entries-table", DataTable)
        table.add_columns("Date", "Weight (kg)", "Change")
        self._load_data()

    def _load_data(self) -> None:
        """Reload entries from the store and refresh table + summary."""
        entries = filter_by_period(self._store.read_all(), self._period, today_str(self._root))
        self._entries = entries

        table = self.query_one("#entries-table", DataTable)
        table.clear()
        prev: WeightEntry | None = None
        rows = []
        for e in entries:
            delta = "" if prev is None else f"{e.weight - prev.weight:+.2f}"
            rows.append((e, delta))
            prev = e
        for e, delta in reversed(rows):
            table.add_row(e.date, f"{e.weight:.2f}", delta, key=e.date)

        summary = summarize(entries)
        parts = [f"Entries: {summary.count}"]
        if summary.last is not None:
            parts.append(f"Latest: {summary.last.weight:.2f} kg ({summary.last.date})")
        if summary.change is not None:
            arrow = "▲" if summary.change > 0 else "▼"
            parts.append(f"Change: {arrow} {abs(summary.change):.1f} kg")
        if summary.forecast is not None:
            parts.append(f"Trend: {summary.forecast:.1f} kg by {summary.forecast_date}")
        self.query_one("#summary", Static).update("\n".join(parts))
        self.sub_title = PERIOD_LABELS[self._period]

    # ── Entry editing ──────────────────────────────────────────

    @on(Input.Submitted, "#weight-input")
    def _on_weight_submitted(self, event: Input.Submitted) -> None:
        self.action_save_entry()

    @on(Input.Submitted, "#import-input")
    def _on_import_submitted(self, event: Input.Submitted) -> None:
        self.action_import_file()

    @on(DataTable.RowSelected, "#entries-table")
    def _on_row_selected(self, event: DataTable.RowSelected) -> None:
        """Load the selected entry into the form for editing."""
        entry_date = event.row_key.value
        for e in self._entries:
            if e.date == entry_date:
                self.query_one("#date-input", Input).value = e.date
                self.query_one("#weight-input", Input).value = f"{e.weight:.2f}"
                self.query_one("#weight-input", Input).focus()
                break

    def action_save_entry(self) -> None:
        entry_date = self.query_one("#date-input", Input).value.strip()
        weight_input = self.query_one("#weight-input", Input)
        try:
            weight = parse_weight_input(weight_input.value)
        except ValueError:
            self.notify("Please enter a valid weight.", title="Invalid entry", severity="warning")
            return

        errors = validate_entry_input(entry_date, weight, today_str(self._root))
        if errors:
            self.notify("; ".join(errors), title="Invalid entry", severity="warning")
            return

        try:
            self._store.upsert(WeightEntry(date=entry_date, weight=weight))
        except PersistenceError as e:
            self.notify(f"Could not save: {e}", title="Error", severity="error")
            return
        weight_input.value = ""
        self.notify(f"Saved {weight:.2f} kg for {entry_date}", title="Saved")
        self._load_data()

    def action_delete_entry(self) -> None:
        table = self.query_one("#entries-table", DataTable)
        if table.row_count == 0:
            return
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        entry_date = row_key.value
        try:
            self._store.remove(entry_date)
        except PersistenceError as e:
            self.notify(f"Could not delete: {e}", title="Error", severity="error")
            return
        self.notify(f"Deleted entry for {entry_date}", title="Deleted")
        self._load_data()

    def action_cycle_period(self) -> None:
        self._period = self._period.next()
        self._load_data()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    # ── Backup ────────────────────────────────────────────────

    def action_export(self) -> None:
        try:
            path = write_export(self._store, export_dir(self._root))
        except ValueError as e:
            self.notify(str(e), title="Export", severity="warning")
            return
        except OSError as e:
            self.notify(f"Export failed: {e}", title="Error", severity="error")
            return
        self.notify(f"Exported to {path}", title="Export")

    def action_import_file(self) -> None:
        raw_path = self.query_one("#import-input", Input).value.strip()
        if not raw_path:
            self.notify("Enter the path of a backup file first.", title="Import", severity="warning")
            return
        path = Path(raw_path).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.notify(f"Cannot read {path}: {e}", title="Import failed", severity="error")
            return

        try:
            report = import_backup(self._store, text, filename=path.name)
        except ImportFormatError as e:
            self.notify(f"Invalid backup file: {e}", title="Import failed", severity="error")
            return
        except PersistenceError as e:
            self.notify(f"Could not save: {e}", title="Import failed", severity="error")
            return

        self.notify(
            f"Imported {report.accepted} of {report.received} records "
            f"({report.skipped} skipped)",
            title="Import",
        )
        self._load_data()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set PESO_TRACKER_ROOT or create the directory first.")
        sys.exit(1)

    configure_logging(log_path(root))
    app = PesoTrackerApp(root=root)
    app.run()


if __name__ == "__main__":
    main()
