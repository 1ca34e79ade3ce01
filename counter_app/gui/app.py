import logging
import os
import tkinter as tk
from tkinter import ttk, messagebox

from counter_app.controllers.counter_controller import CounterController, load_controller
from counter_app.gui.tabs.counters_tab import CountersTab
from counter_app.gui.ui.treeview_kit import apply_style
from counter_app.utils.errors import PoolFormatError
from counter_app.utils.logging_setup import setup_logging

log = logging.getLogger(__name__)

DEFAULT_CACHE = os.path.join(os.path.dirname(__file__), "..", "data", "types_cache.json")


def build_controller() -> CounterController:
    cache = os.environ.get("COUNTER_TYPES_CACHE") or os.path.abspath(DEFAULT_CACHE)
    return load_controller(cache_path=cache)


class CounterApp(ttk.Frame):
    def __init__(self, master=None, controller: CounterController | None = None, palette: dict | None = None):
        super().__init__(master)
        self.master.title("Pokémon Counter Finder")
        self.master.geometry("1100x760")
        self.pack(fill="both", expand=True)

        try:
            self.controller = controller or build_controller()
        except (OSError, PoolFormatError) as e:
            messagebox.showerror("Pool", f"No se pudo cargar el pool de counters:\n{e}")
            raise

        self.counters_tab = CountersTab(self, self.controller, palette)
        self.counters_tab.pack(fill="both", expand=True)
        self.counters_tab.refresh()


def run():
    setup_logging()  # nivel INFO por defecto; usa log_to_file=True para archivo rotativo
    root = tk.Tk()
    palette = apply_style(root, variant="dark")
    app = CounterApp(master=root, palette=palette)
    app.mainloop()


if __name__ == "__main__":
    run()
