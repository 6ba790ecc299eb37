"""Command-line interface loop for the kanban board.

The board is redrawn every cycle; the outcome of the last command (or its
error) is shown under the board. Task ids are typed as unique prefixes of
the id shown on each card. Saving is not done here: main subscribes the
storage layer to the store, so every mutation is flushed as it happens.
"""
import logging
import shutil
from typing import Callable, List, Optional

from board import TaskStore
from drag import DragController
from errors import KanbanError, ValidationError
from models import COLUMN_IDS, DEFAULT_COLUMN, DEFAULT_PRIORITY, PRIORITIES, column_title
from storage import Storage
from theme import Theme
from view import BoardView, short_id

logger = logging.getLogger(__name__)

# --- terminal control helpers ---
# We aggressively clear: ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home))
# Order (3J first) improves reliability in some terminals.
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


COLUMN_ALIASES = {
    't': 'todo',
    'todo': 'todo',
    'ip': 'in-progress',
    'in-progress': 'in-progress',
    'doing': 'in-progress',
    'd': 'done',
    'done': 'done'
}

PRIORITY_ALIASES = {
    'l': 'low',
    'low': 'low',
    'm': 'medium',
    'medium': 'medium',
    'h': 'high',
    'high': 'high'
}

HELP_LINES = (
    "Commands:",
    "  add                   Add a task (prompts for title, description, priority, column)",
    "  add <title...>        Shorthand add with inline title (medium priority, To Do)",
    "  edit <id>             Edit title, description, priority and column",
    "  mv <id> <column>      Move a task; column aliases: t (todo), ip (in-progress), d (done)",
    "  pick <id>             Pick a task up",
    "  drop <column>         Drop the picked-up task into a column",
    "  rm <id>               Remove a task (asks for confirmation)",
    "  dark                  Toggle dark mode",
    "  help                  Show this help (press Enter to return)",
    "  exit                  Save and exit",
    "",
    "Ids are the short codes shown on each card; any unique prefix works.",
)


class CLI:
    def __init__(self,
                 store: TaskStore,
                 storage: Storage,
                 theme: Theme,
                 drag: Optional[DragController] = None,
                 alt_screen: bool = True,
                 input_func: Callable[[str], str] = input):
        self.store = store
        self.storage = storage
        self.theme = theme
        self.drag = drag if drag is not None else DragController(store)
        self.view = BoardView(store, theme)
        self.alt_screen = alt_screen
        self._input = input_func
        self.message: Optional[str] = None

    def run(self) -> None:
        """Main REPL loop; board is always cleared/redrawn each cycle.

        Uses the terminal's alternate screen (if enabled) so prior board
        renders do not remain in scrollback history.
        """
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                self.redraw()
                line = self._input("\n: ").strip()
                self.message = None
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    print('\n'.join(HELP_LINES))
                    self._input("\nPress Enter to return to the board...")
                    continue
                if lower == 'exit':
                    exit_message = "Goodbye."
                    break
                self.message = self.handle_command(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            try:
                self.storage.save(self.store.all_tasks())
            finally:
                if self.alt_screen:
                    _leave_alt_screen()
                if exit_message:
                    print(exit_message)

    def redraw(self) -> None:
        _clear_screen()
        print(self.theme.color("Kanban Board", self.theme.HEADER_COLOR, self.theme.BOLD)
              + f"  ({self.store})")
        width = shutil.get_terminal_size((120, 30)).columns
        print(self.view.render(width, picked_up=self.drag.picked_up_task_id))
        if self.message:
            print("\n" + self.message)

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> Optional[str]:
        """Run one command line; returns the message to show (errors included)."""
        tokens = line.split()
        if not tokens:
            return None
        cmd = tokens[0].lower()
        handler = {
            'add': self._cmd_add,
            'edit': self._cmd_edit,
            'mv': self._cmd_mv,
            'move': self._cmd_mv,
            'pick': self._cmd_pick,
            'drop': self._cmd_drop,
            'rm': self._cmd_rm,
            'remove': self._cmd_rm,
            'dark': self._cmd_dark,
        }.get(cmd)
        if handler is None:
            return "Unknown command. Type 'help' for instructions."
        try:
            return handler(tokens)
        except KanbanError as exc:
            logger.info("command %r rejected: %s", cmd, exc)
            return str(exc)

    # ---- individual command helpers ----
    def _cmd_add(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) > 1:  # inline shorthand
            title = ' '.join(tokens[1:]).strip()
            task = self.store.add(title)
        else:
            title = self._input("Title: ").strip()
            if not title:
                raise ValidationError("Title required.")
            description = self._input("Description: ").strip()
            priority = self._ask_priority(DEFAULT_PRIORITY)
            column_id = self._ask_column(DEFAULT_COLUMN)
            task = self.store.add(title, description, priority, column_id)
        return f'Added {short_id(task.id)} "{task.title}".'

    def _cmd_edit(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: edit <id>"
        task = self.store.find_by_prefix(tokens[1])
        title = self._input(f"Title [{task.title}]: ").strip() or task.title
        description = self._input(f"Description [{task.description}] ('-' clears): ").strip()
        if description == '-':
            description = ''
        elif not description:
            description = task.description
        priority = self._ask_priority(task.priority)
        column_id = self._ask_column(task.column_id)
        patch = {}
        for name, value in (('title', title), ('description', description),
                            ('priority', priority), ('column_id', column_id)):
            if getattr(task, name) != value:
                patch[name] = value
        if not patch:
            return "No changes."
        updated = self.store.update(task.id, patch)
        return f'Updated {short_id(updated.id)} "{updated.title}".'

    def _cmd_mv(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 3:
            return "Usage: mv <id> <column>; columns: t/ip/d"
        task = self.store.find_by_prefix(tokens[1])
        column_id = _resolve_column(tokens[2])
        self.store.move(task.id, column_id)
        # success is visible on the board; stay quiet
        return None

    def _cmd_pick(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: pick <id>"
        task = self.store.find_by_prefix(tokens[1])
        self.drag.begin_drag(task.id)
        return f'Holding {short_id(task.id)} "{task.title}"; drop it with: drop <column>'

    def _cmd_drop(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: drop <column>; columns: t/ip/d"
        if not self.drag.is_holding:
            return "Nothing picked up."
        self.drag.drop_on(_resolve_column(tokens[1]))
        return None

    def _cmd_rm(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: rm <id>"
        task = self.store.find_by_prefix(tokens[1].rstrip('.'))
        answer = self._input(f'Are you sure you want to delete "{task.title}"? [y/N] ').strip().lower()
        if answer not in ('y', 'yes'):
            return "Delete cancelled."
        self.store.delete(task.id)
        return f'Task {short_id(task.id)} removed.'

    def _cmd_dark(self, tokens: List[str]) -> Optional[str]:
        dark = self.theme.toggle()
        self.storage.save_preference(dark)
        return f"Dark mode {'on' if dark else 'off'}."

    # -------------------- prompts --------------------
    def _ask_priority(self, default: str) -> str:
        raw = self._input(f"Priority ({'/'.join(PRIORITIES)}) [{default}]: ").strip().lower()
        if not raw:
            return default
        priority = PRIORITY_ALIASES.get(raw)
        if priority is None:
            raise ValidationError(f"Invalid priority: {raw}.")
        return priority

    def _ask_column(self, default: str) -> str:
        choices = '/'.join(COLUMN_IDS)
        raw = self._input(f"Column ({choices} or t/ip/d) [{column_title(default)}]: ").strip()
        if not raw:
            return default
        return _resolve_column(raw)


def _resolve_column(raw: str) -> str:
    column_id = COLUMN_ALIASES.get(raw.lower())
    if column_id is None:
        # let the store reject it with its own error
        return raw
    return column_id
