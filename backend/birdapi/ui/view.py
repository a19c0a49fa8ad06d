"""
Bird Sightings UI - Tkinter Window
===================================

Layout:
    ┌──────────────────────┬──────────────────────────────────────┐
    │ Add New Bird         │ All Birds (Select to see sightings)  │
    │ Add New Sighting     │                                      │
    │ Search Birds         ├──────────────────────────────────────┤
    │                      │ Sightings for Selected Bird          │
    └──────────────────────┴──────────────────────────────────────┘

Thread handoff:
    Worker threads never touch widgets. `run_on_ui` puts callbacks on a
    queue that the Tk main loop drains every POLL_MS milliseconds.
"""

import queue
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Callable, Dict, List

from birdapi.schemas.bird import BirdDto
from birdapi.schemas.sighting import SightingDto
from birdapi.ui.columns import BIRD_COLUMNS, SIGHTING_COLUMNS, bird_row, sighting_row
from birdapi.ui.presenter import BirdPresenter, BirdView

POLL_MS = 50


class BirdApiView(BirdView):

    def __init__(self, root: tk.Tk):
        self.root = root
        self.presenter: BirdPresenter | None = None
        self._ui_queue: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self._fields: Dict[str, tk.StringVar] = {}

        root.title("Bird Sightings")
        panes = ttk.PanedWindow(root, orient=tk.HORIZONTAL)
        panes.pack(fill=tk.BOTH, expand=True)

        left = ttk.Frame(panes, padding=6)
        right = ttk.Frame(panes, padding=6)
        panes.add(left, weight=40)
        panes.add(right, weight=60)

        self._build_form(left, "Add New Bird", ("Name", "Color", "Weight", "Height"),
                         "Add Bird", self._on_add_bird, prefix="bird")
        self._build_form(left, "Add New Sighting", ("Bird ID", "Location"),
                         "Add Sighting", self._on_add_sighting, prefix="sighting")
        self._build_form(left, "Search Birds", ("Name", "Color"),
                         "Search", self._on_search, prefix="search")

        self.bird_table = self._build_table(
            right, "All Birds (Select to see sightings)", BIRD_COLUMNS,
            "Delete Bird", self._on_delete_bird,
        )
        self.bird_table.bind("<<TreeviewSelect>>", self._on_bird_selected)
        self.sighting_table = self._build_table(
            right, "Sightings for Selected Bird", SIGHTING_COLUMNS,
            "Delete Sighting", self._on_delete_sighting,
        )

        root.after(POLL_MS, self._drain_ui_queue)

    def bind(self, presenter: BirdPresenter) -> None:
        self.presenter = presenter

    # ── BirdView ──────────────────────────────────────────────────────────

    def run_on_ui(self, callback: Callable[[], None]) -> None:
        self._ui_queue.put(callback)

    def show_birds(self, birds: List[BirdDto]) -> None:
        self._fill(self.bird_table, [bird_row(b) for b in birds])

    def show_sightings(self, sightings: List[SightingDto]) -> None:
        self._fill(self.sighting_table, [sighting_row(s) for s in sightings])

    def clear_bird_form(self) -> None:
        self._clear("bird")

    def clear_sighting_form(self) -> None:
        self._clear("sighting")

    def show_error(self, message: str) -> None:
        messagebox.showerror("Bird Sightings", message, parent=self.root)

    # ── Widget construction ───────────────────────────────────────────────

    def _build_form(self, parent, title, labels, button_text, command, prefix) -> None:
        group = ttk.LabelFrame(parent, text=title, padding=6)
        group.pack(fill=tk.X, pady=(0, 8))
        group.columnconfigure(1, weight=1)
        for row, label in enumerate(labels):
            var = tk.StringVar()
            self._fields[f"{prefix}.{label}"] = var
            ttk.Label(group, text=f"{label}:").grid(row=row, column=0, sticky=tk.W, padx=(0, 6))
            ttk.Entry(group, textvariable=var).grid(row=row, column=1, sticky=tk.EW, pady=2)
        ttk.Button(group, text=button_text, command=command).grid(
            row=len(labels), column=0, columnspan=2, sticky=tk.EW, pady=(4, 0)
        )

    def _build_table(self, parent, title, columns, button_text, command) -> ttk.Treeview:
        group = ttk.LabelFrame(parent, text=title, padding=6)
        group.pack(fill=tk.BOTH, expand=True, pady=(0, 8))
        table = ttk.Treeview(group, columns=[c for c, _ in columns], show="headings",
                             selectmode="browse")
        for name, width in columns:
            table.heading(name, text=name)
            table.column(name, width=width, stretch=True)
        scroll = ttk.Scrollbar(group, orient=tk.VERTICAL, command=table.yview)
        table.configure(yscrollcommand=scroll.set)
        ttk.Button(group, text=button_text, command=command).pack(side=tk.BOTTOM, anchor=tk.E)
        scroll.pack(side=tk.RIGHT, fill=tk.Y)
        table.pack(fill=tk.BOTH, expand=True)
        return table

    # ── Helpers ───────────────────────────────────────────────────────────

    def _value(self, key: str) -> str:
        return self._fields[key].get()

    def _clear(self, prefix: str) -> None:
        for key, var in self._fields.items():
            if key.startswith(prefix + "."):
                var.set("")

    @staticmethod
    def _fill(table: ttk.Treeview, rows) -> None:
        table.delete(*table.get_children())
        for row in rows:
            table.insert("", tk.END, iid=row[0], values=row)

    @staticmethod
    def _selected_id(table: ttk.Treeview) -> int | None:
        selection = table.selection()
        return int(selection[0]) if selection else None

    def _drain_ui_queue(self) -> None:
        while True:
            try:
                callback = self._ui_queue.get_nowait()
            except queue.Empty:
                break
            callback()
        self.root.after(POLL_MS, self._drain_ui_queue)

    # ── Event handlers ────────────────────────────────────────────────────

    def _on_add_bird(self) -> None:
        self.presenter.add_bird(
            self._value("bird.Name"),
            self._value("bird.Color"),
            self._value("bird.Weight"),
            self._value("bird.Height"),
        )

    def _on_add_sighting(self) -> None:
        self.presenter.add_sighting(self._value("sighting.Bird ID"), self._value("sighting.Location"))

    def _on_search(self) -> None:
        self.presenter.search_birds(self._value("search.Name"), self._value("search.Color"))

    def _on_bird_selected(self, _event) -> None:
        self.presenter.select_bird(self._selected_id(self.bird_table))

    def _on_delete_bird(self) -> None:
        bird_id = self._selected_id(self.bird_table)
        if bird_id is not None:
            self.presenter.delete_bird(bird_id)

    def _on_delete_sighting(self) -> None:
        sighting_id = self._selected_id(self.sighting_table)
        if sighting_id is not None:
            self.presenter.delete_sighting(sighting_id)
