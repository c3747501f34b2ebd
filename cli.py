"""
Terminal dashboard for the Oathplate calculator.

Startup menu followed by a command loop (fetch, calc, show, set, load, save,
quit). Inputs accept GP amounts like 125k, 1.25m, 2b or 1,250,000.
"""

import logging
from typing import Callable, Optional

from engine.models import PriceSnapshot
from engine.overrides import UnknownField
from engine.report import compute_report
from services.cache_store import CacheStatus
from services.fetch import FetchError
from services.session import AppSession
from utils.gp import InvalidFormat, parse_non_negative_gp
from utils.report_text import render_prices, render_report

HELP = "Command (fetch, calc, show, set <field> <value>, load, save, help, quit): "
FIELD_HELP = (
    "Fields: ingredientA, ingredientB, item1, item2, item3 (or shale, shard, armor1-3), "
    "optionally with .high, .low or .avg"
)


class TerminalDashboard:
    """Interactive text front end over an :class:`AppSession`."""

    def __init__(
        self,
        session: AppSession,
        fetcher,
        crafted: Optional[list] = None,
        input_fn: Callable[[str], str] = input,
        print_fn: Callable[..., None] = print,
    ):
        self.session = session
        self.fetcher = fetcher
        self.crafted = crafted
        self.input = input_fn
        self.print = print_fn
        self.logger = logging.getLogger(__name__)

    def run(self) -> int:
        self.print("Oathplate Profit Calculator")
        self.print("Inputs accept: 125k, 1.25m, 2b, 1,250,000")
        self.print()
        self.show_cache_status()

        choice = self.startup_menu()
        if choice == "quit":
            return 0
        if choice == "input":
            self.manual_input()
        elif choice == "fetch":
            if not self.do_fetch():
                self.print("Falling back to manual input.")
                self.manual_input()
        elif choice == "load":
            if not self.do_load():
                self.print("Falling back to manual input.")
                self.manual_input()

        self.print_calc()
        return self.command_loop()

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------
    def read_line(self, prompt: str) -> str:
        return self.input(prompt).strip()

    def read_gp(self, prompt: str) -> int:
        while True:
            try:
                return parse_non_negative_gp(self.read_line(prompt))
            except InvalidFormat:
                self.print("Please enter a valid GP amount (supports k, m, b).")

    def startup_menu(self) -> str:
        choices = {
            "1": "input", "input": "input",
            "2": "fetch", "fetch": "fetch",
            "3": "load", "load": "load",
            "4": "quit", "quit": "quit", "exit": "quit", "q": "quit",
        }
        while True:
            self.print("Startup Menu")
            self.print("  1) Manual input")
            self.print("  2) Fetch prices (and cache)")
            self.print("  3) Load cached prices")
            self.print("  4) Quit")
            self.print()
            line = self.read_line("Choose 1/2/3/4 or type input/fetch/load/quit: ").lower()
            if line in choices:
                return choices[line]
            self.print("Invalid choice.")
            self.print()

    def manual_input(self) -> None:
        snapshot = PriceSnapshot.default(self.crafted)
        shale = self.read_gp("What is the cost of Infernal Shale? ")
        shard = self.read_gp("What is the cost of Oathplate Shards? ")
        snapshot.ingredient_a.high = snapshot.ingredient_a.low = snapshot.ingredient_a.avg = shale
        snapshot.ingredient_b.high = snapshot.ingredient_b.low = snapshot.ingredient_b.avg = shard
        for item in snapshot.items:
            value = self.read_gp(f"What is the price of the {item.name}? ")
            item.price.high = item.price.low = item.price.avg = value
        self.session.set_manual(snapshot)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def show_cache_status(self) -> None:
        result = self.session.cache_store.load_result()
        if result.status is CacheStatus.OK:
            cached = compute_report(result.state.snapshot, result.state.provenance)
            freshness = "fresh" if cached.fresh else "stale"
            self.print(f"Cache available ({freshness}).")
            self.print(render_prices(cached))
        elif result.status is CacheStatus.CORRUPT:
            self.print("Cache file is unreadable; it will be replaced on the next save.")
        else:
            self.print("No cache file found.")
        self.print()

    def print_calc(self) -> None:
        self.print()
        self.print(render_report(self.session.report()))

    def print_prices(self) -> None:
        self.print(render_prices(self.session.report()))

    def do_fetch(self) -> bool:
        try:
            applied = self.session.fetch(self.fetcher)
        except FetchError as e:
            self.print(f"Fetch failed: {e}")
            return False
        if applied:
            self.print("Prices refreshed and cached.")
            self.print_prices()
        else:
            self.print("Fetch result discarded: prices were edited meanwhile.")
        return applied

    def do_load(self) -> bool:
        result = self.session.load_cache()
        if result.status is CacheStatus.OK:
            self.print("Loaded cache.")
            self.print_prices()
            return True
        self.print("No usable cache found.")
        return False

    def do_save(self) -> None:
        try:
            self.session.save_cache()
        except OSError as e:
            self.print(f"Save failed: {e}")
            return
        self.print("Saved cache.")

    def do_set(self, parts) -> None:
        if len(parts) < 3:
            self.print("Usage: set <field> <value>, e.g. set shale 125k")
            self.print(FIELD_HELP)
            return
        field = parts[1]
        text = "".join(parts[2:])
        try:
            self.session.apply_edit(field, text)
        except UnknownField as e:
            self.print(f"Unknown field: {e}")
            self.print(FIELD_HELP)
            return
        except InvalidFormat:
            self.print("Invalid value. Example: 125k or 1.25m")
            return
        self.print("Updated (manual override; fetch timestamp unchanged).")
        self.print_prices()

    def command_loop(self) -> int:
        while True:
            self.print()
            try:
                line = self.read_line(HELP)
            except EOFError:
                return 0
            if not line:
                continue
            parts = line.split()
            command = parts[0].lower()
            if command in ("quit", "exit", "q"):
                return 0
            elif command == "show":
                self.print_prices()
            elif command == "calc":
                self.print_calc()
            elif command == "fetch":
                self.do_fetch()
            elif command == "load":
                self.do_load()
            elif command == "save":
                self.do_save()
            elif command == "set":
                self.do_set(parts)
            elif command == "help":
                self.print(FIELD_HELP)
            else:
                self.print("Unknown command.")
