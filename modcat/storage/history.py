"""
Command history for the interactive shell, persisted as one line per entry.
"""

import logging
from pathlib import Path

log = logging.getLogger(__name__)


class CommandHistory:
    """
    Shell history with an explicit lifecycle: load at start, append and save
    on each accepted command, save again at exit.
    """

    MAX_ENTRIES = 1000

    def __init__(self, history_path: Path, max_entries: int = MAX_ENTRIES):
        self.history_path = history_path
        self.max_entries = max_entries
        self.entries: list[str] = []
        self.loaded = False

    def load(self) -> bool:
        """Loads previous history. Returns False if there was none to load."""
        try:
            with open(self.history_path, encoding="utf-8") as f:
                self.entries = [line.rstrip("\n") for line in f if line.strip()]
        except FileNotFoundError:
            self.loaded = True
            return False
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"[yellow]Could not read history file:[/] {e}")
            return False
        self.entries = self.entries[-self.max_entries :]
        self.loaded = True
        return True

    def append(self, line: str) -> None:
        line = line.strip()
        if not line or (self.entries and self.entries[-1] == line):
            return
        self.entries.append(line)
        if len(self.entries) > self.max_entries:
            del self.entries[: len(self.entries) - self.max_entries]

    def save(self) -> None:
        """Writes the entries back. Does nothing unless `load()` succeeded."""
        if not self.loaded:
            log.debug("History was not loaded; leaving the history file untouched.")
            return
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_path, "w", encoding="utf-8") as f:
                f.writelines(f"{entry}\n" for entry in self.entries)
        except OSError as e:
            log.warning(f"[yellow]Could not save history file:[/] {e}")
