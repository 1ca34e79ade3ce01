# counter_app/gui/tabs/counters_tab.py
import logging
import tkinter as tk
from tkinter import ttk

from counter_app.gui.ui.treeview_kit import set_style, insert_with_zebra, autosize_columns, risk_tag, type_badge
from counter_app.models.attacker import Filters
from counter_app.services.types import ALL_TYPES, bucket_weaknesses, weakness_vector

log = logging.getLogger(__name__)

MAX_TYPES = 2


class CountersTab(ttk.Frame):
    def __init__(self, master, controller, palette: dict | None = None):
        super().__init__(master)
        self.controller = controller
        self.palette = palette

        # estado
        self.mode = tk.StringVar(value="pokemon")
        self.query = tk.StringVar()
        self.picked_types: list[str] = []
        self.target = None
        self.allow_restricted = tk.BooleanVar(value=True)
        self.show_mega = tk.BooleanVar(value=True)
        self.show_neutral = tk.BooleanVar(value=False)
        self.show_resists = tk.BooleanVar(value=False)

        self._build_ui()
        self.query.trace_add("write", lambda *_: self._update_suggestions())

    # ---------------- UI ----------------
    def _build_ui(self):
        top = ttk.LabelFrame(self, text="Objetivo")
        top.pack(fill="x", padx=8, pady=8)

        ttk.Radiobutton(top, text="Pokémon", value="pokemon", variable=self.mode,
                        command=self.refresh).grid(row=0, column=0, sticky="w", padx=4)
        ttk.Radiobutton(top, text="Tipos", value="types", variable=self.mode,
                        command=self.refresh).grid(row=0, column=1, sticky="w", padx=4)

        ttk.Label(top, text="Nombre:").grid(row=1, column=0, sticky="w", padx=4, pady=4)
        self.ent_query = ttk.Entry(top, textvariable=self.query, width=32)
        self.ent_query.grid(row=1, column=1, columnspan=3, sticky="w", padx=4, pady=4)
        self.ent_query.bind("<Return>", lambda e: self._commit(self.query.get()))
        self.ent_query.bind("<Down>", lambda e: self.lst_sug.focus_set())

        self.lst_sug = tk.Listbox(top, height=6, width=32)
        self.lst_sug.grid(row=2, column=1, columnspan=3, sticky="w", padx=4)
        self.lst_sug.bind("<<ListboxSelect>>", self._on_suggestion)
        self.lst_sug.bind("<Return>", self._on_suggestion)

        types_box = ttk.Frame(top)
        types_box.grid(row=1, column=4, rowspan=2, padx=12, sticky="n")
        self._type_buttons = {}
        for i, t in enumerate(ALL_TYPES):
            btn = tk.Checkbutton(types_box, text=t, indicatoron=False, width=9,
                                 command=lambda tt=t: self._toggle_type(tt))
            btn.grid(row=i // 6, column=i % 6, padx=1, pady=1)
            self._type_buttons[t] = btn
        ttk.Label(types_box, text="Máximo 2 tipos.").grid(row=3, column=0, columnspan=6, sticky="w")

        opts = ttk.Frame(top)
        opts.grid(row=3, column=0, columnspan=5, sticky="w", pady=(6, 2))
        for txt, var in (("Mostrar Megas", self.show_mega),
                         ("Permitir legendarios restringidos", self.allow_restricted),
                         ("Mostrar neutros", self.show_neutral),
                         ("Mostrar resistencias", self.show_resists)):
            ttk.Checkbutton(opts, text=txt, variable=var, command=self.refresh).pack(side="left", padx=6)

        # objetivo + debilidades
        self.lbl_target = ttk.Label(self, text="Objetivo: —", font=("TkDefaultFont", 11, "bold"))
        self.lbl_target.pack(anchor="w", padx=12)
        self.weak_frame = ttk.Frame(self)
        self.weak_frame.pack(fill="x", padx=12, pady=(2, 8))

        # tabla de counters
        cols = ("name", "types", "hit", "mult", "damage", "risk", "score")
        self.tree = ttk.Treeview(self, columns=cols, show="headings", height=16)
        self.tree.pack(fill="both", expand=True, padx=8, pady=(0, 8))
        set_style(self.tree, self.palette)
        cfg = [
            ("name",   200, "Counter"),
            ("types",  140, "Tipos"),
            ("hit",     90, "Golpea con"),
            ("mult",    50, "x"),
            ("damage",  90, "Daño potencial"),
            ("risk",    90, "Daño recibido"),
            ("score",   70, "Score"),
        ]
        for key, w, txt in cfg:
            self.tree.column(key, width=w, anchor="w" if key in ("name", "types", "hit") else "e")
            self.tree.heading(key, text=txt)

        self.lbl_empty = ttk.Label(self, text="")
        self.lbl_empty.pack(anchor="w", padx=12, pady=(0, 8))

    # ---------------- Eventos ----------------
    def _update_suggestions(self):
        self.lst_sug.delete(0, "end")
        for n in self.controller.suggest(self.query.get()):
            self.lst_sug.insert("end", n)

    def _on_suggestion(self, event=None):
        sel = self.lst_sug.curselection()
        if sel:
            self._commit(self.lst_sug.get(sel[0]))

    def _commit(self, name: str):
        name = (name or "").strip()
        if not name:
            return
        self.target = self.controller.resolver.resolve(name)
        log.info("Objetivo: %s %s (habilidad=%s)", self.target.name, list(self.target.types), self.target.ability_tag)
        self.mode.set("pokemon")
        self.refresh()

    def _toggle_type(self, t: str):
        if t in self.picked_types:
            self.picked_types.remove(t)
        else:
            self.picked_types.append(t)
            if len(self.picked_types) > MAX_TYPES:
                self.picked_types.pop(0)  # se descarta el más antiguo
        for tt, btn in self._type_buttons.items():
            if tt in self.picked_types:
                btn.select()
            else:
                btn.deselect()
        self.mode.set("types")
        self.refresh()

    # ---------------- Render ----------------
    def _active(self):
        if self.mode.get() == "pokemon":
            if not self.target:
                return "—", [], None
            return self.target.name, list(self.target.types), self.target.ability_tag
        return " / ".join(self.picked_types) or "—", list(self.picked_types), None

    def _render_weaknesses(self, types):
        for w in self.weak_frame.winfo_children():
            w.destroy()
        b = bucket_weaknesses(weakness_vector(types))
        rows = [("Debilidades:", b["x4"] + b["x2"])]
        if self.show_neutral.get():
            rows.append(("Neutros:", b["x1"]))
        if self.show_resists.get():
            rows.append(("Resiste:", b["resist"] + b["immune"]))
        for r, (label, items) in enumerate(rows):
            ttk.Label(self.weak_frame, text=label, width=14).grid(row=r, column=0, sticky="w")
            if not items:
                ttk.Label(self.weak_frame, text="—").grid(row=r, column=1, sticky="w")
            for c, (t, m) in enumerate(items, start=1):
                cell = ttk.Frame(self.weak_frame)
                cell.grid(row=r, column=c, padx=2, pady=1)
                type_badge(cell, t).pack(side="left")
                ttk.Label(cell, text=f"x{m:g}").pack(side="left", padx=(2, 0))

    def refresh(self):
        for iid in self.tree.get_children():
            self.tree.delete(iid)
        label, types, ability = self._active()
        self.lbl_target.configure(text=f"Objetivo: {label}" + (f"  ({ability})" if ability else ""))
        self._render_weaknesses(types)

        filters = Filters(allow_restricted=self.allow_restricted.get(), show_mega=self.show_mega.get())
        result = self.controller.query(types, ability, filters)
        for p in result.picks:
            insert_with_zebra(self.tree, (
                p.attacker.name,
                " / ".join(p.attacker.types),
                p.hit_type,
                f"{p.mult:g}",
                p.damage_potential,
                p.risk,
                f"{p.display_score:.3f}",
            ), tags=(risk_tag(p.risk),) if risk_tag(p.risk) else ())
        autosize_columns(self.tree)

        if not types:
            self.lbl_empty.configure(text="Sin objetivo todavía.")
        elif not result.picks:
            self.lbl_empty.configure(text="No se encontraron counters.")
        else:
            self.lbl_empty.configure(text=f"{len(result.picks)} counters")
