# counter_app/gui/ui/treeview_kit.py
import tkinter as tk
from tkinter import ttk, font as tkfont

STYLE = "Counter.Treeview"

# Colores de insignia por tipo
TYPE_COLORS = {
    "Normal":"#A8A77A", "Fire":"#EE8130", "Water":"#6390F0", "Electric":"#F7D02C", "Grass":"#7AC74C",
    "Ice":"#96D9D6", "Fighting":"#C22E28", "Poison":"#A33EA1", "Ground":"#E2BF65", "Flying":"#A98FF3",
    "Psychic":"#F95587", "Bug":"#A6B91A", "Rock":"#B6A136", "Ghost":"#735797", "Dragon":"#6F35FC",
    "Dark":"#705746", "Steel":"#B7B7CE", "Fairy":"#D685AD",
}

PALETTES = {
    "dark": {
        "bg": "#1e293b", "fg": "#e2e8f0", "field": "#0f172a",
        "sel_bg": "#6366f1", "sel_fg": "#ffffff",
        "head_bg": "#0f172a", "head_fg": "#f8fafc",
        "grid": "#334155", "hover": "#4338ca",
        "odd": "#1e293b", "even": "#273449",
    },
    "light": {
        "bg": "#ffffff", "fg": "#222222", "field": "#ffffff",
        "sel_bg": "#e0e7ff", "sel_fg": "#312e81",
        "head_bg": "#f5f5f5", "head_fg": "#333333",
        "grid": "#dddddd", "hover": "#ececec",
        "odd": "#fafafa", "even": "#ffffff",
    },
}

def apply_style(root, variant: str = "dark", theme: str = "clam") -> dict:
    """
    Estilo común para los Treeview de la app. Llamar una vez al arrancar.
    Devuelve la paleta usada (para cebra y etiquetas de riesgo).
    """
    style = ttk.Style(root)
    try:
        style.theme_use(theme)
    except tk.TclError:
        pass
    palette = PALETTES.get(variant, PALETTES["light"])

    font_row = tkfont.nametofont("TkDefaultFont").copy()
    font_head = tkfont.nametofont("TkHeadingFont").copy()
    font_head.configure(weight="bold")

    style.configure(
        STYLE, font=font_row, rowheight=22,
        background=palette["bg"], fieldbackground=palette["field"], foreground=palette["fg"],
        bordercolor=palette["grid"], lightcolor=palette["grid"], darkcolor=palette["grid"],
    )
    style.map(STYLE, background=[("selected", palette["sel_bg"])], foreground=[("selected", palette["sel_fg"])])
    style.configure(f"{STYLE}.Heading", font=font_head, background=palette["head_bg"],
                    foreground=palette["head_fg"], bordercolor=palette["grid"])
    style.map(f"{STYLE}.Heading", background=[("active", palette["hover"])])
    return palette

def set_style(tree: ttk.Treeview, palette: dict | None = None):
    tree.configure(style=STYLE)
    palette = palette or PALETTES["light"]
    tree.tag_configure("odd", background=palette["odd"])
    tree.tag_configure("even", background=palette["even"])
    # riesgo entrante
    tree.tag_configure("risk_low", foreground="#16a34a")
    tree.tag_configure("risk_high", foreground="#dc2626")

def insert_with_zebra(tree: ttk.Treeview, values, **kwargs):
    """Inserta una fila alternando 'even'/'odd'."""
    idx = len(tree.get_children(""))
    tags = set(kwargs.pop("tags", ()))
    tags.add("even" if idx % 2 == 0 else "odd")
    return tree.insert("", "end", values=values, tags=tuple(tags), **kwargs)

def risk_tag(risk: int) -> str:
    if risk <= 25:
        return "risk_low"
    if risk >= 75:
        return "risk_high"
    return ""

def autosize_columns(tree: ttk.Treeview, pad=24, min_w=50, max_w=320):
    f = tkfont.nametofont("TkDefaultFont")
    for col in tree["columns"]:
        width = f.measure(tree.heading(col, "text") or "") + pad
        for iid in tree.get_children(""):
            width = max(width, f.measure(str(tree.set(iid, col))) + pad)
        tree.column(col, width=max(min_w, min(width, max_w)))

def type_badge(master, type_name: str) -> tk.Label:
    return tk.Label(master, text=type_name, bg=TYPE_COLORS.get(type_name, "#cccccc"),
                    fg="#0f172a", padx=6, pady=1, font=("TkDefaultFont", 9, "bold"))
