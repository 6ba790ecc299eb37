"""Board rendering: columns side by side, one card per task.

A card is:
    <short id> <title, wrapped>
    <priority> · <created date>
    <description, at most DESCRIPTION_LINES wrapped lines>
Headers carry the column title and its task count. The card currently
picked up (pick/drop) is marked so the user can see what is being held.
Columns never shrink below MIN_COL_WIDTH, so on terminals narrower than
three minimum columns plus separators the rows run past the right edge.
"""
import re
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from board import TaskStore
from models import COLUMNS, COLUMN_IDS, Task
from theme import Theme

MIN_COL_WIDTH = 18
SEP = " | "
SHORT_ID_LEN = 8
DESCRIPTION_LINES = 2
HELD_MARK = " (held)"
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def short_id(task_id: str) -> str:
    return task_id[:SHORT_ID_LEN]


def format_date(value: str) -> str:
    """'2026-10-19T08:30:00.000Z' -> 'Oct 19, 2026'; unparsable input is returned as is."""
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        return value
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def wrap_words(text: str, width: int) -> List[str]:
    """Greedy word wrap; words longer than the width are split."""
    width = max(1, width)
    lines: List[str] = []
    current = ''
    for word in text.split():
        while len(word) > width:
            if current:
                lines.append(current)
                current = ''
            lines.append(word[:width])
            word = word[width:]
        candidate = word if not current else current + ' ' + word
        if len(candidate) <= width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


class BoardView:
    def __init__(self, store: TaskStore, theme: Theme):
        self.store = store
        self.theme = theme

    def render(self, width: int = 120, picked_up: Optional[str] = None) -> str:
        columns = {cid: self.store.list_by_column(cid) for cid in COLUMN_IDS}
        widths = self._compute_column_widths(columns, width, picked_up)
        cells = {cid: self._column_lines(columns[cid], widths[cid], picked_up) for cid in COLUMN_IDS}
        return '\n'.join(self._rows(columns, widths, cells))

    # ---- width calculation ----
    def _header_text(self, column_id: str, count: int) -> str:
        title = next(c.title for c in COLUMNS if c.id == column_id)
        return f"{title.upper()} ({count})"

    def _compute_column_widths(self, columns: Mapping[str, List[Task]], term_width: int,
                               picked_up: Optional[str]) -> Dict[str, int]:
        sep_total = len(SEP) * (len(COLUMN_IDS) - 1)
        widths: Dict[str, int] = {}
        for cid in COLUMN_IDS:
            longest = len(self._header_text(cid, len(columns[cid])))
            for t in columns[cid]:
                held = HELD_MARK if t.id == picked_up else ''
                indent = len(short_id(t.id)) + 1
                candidate = indent + max(len(t.title) + len(held), len(self._meta_text(t)))
                longest = max(longest, candidate)
            widths[cid] = max(MIN_COL_WIDTH, longest)
        total = sum(widths.values()) + sep_total
        if total > term_width:
            target_space = max(term_width - sep_total, len(COLUMN_IDS) * MIN_COL_WIDTH)
            while sum(widths.values()) > target_space:
                widest = max(COLUMN_IDS, key=lambda c: widths[c])
                if widths[widest] <= MIN_COL_WIDTH:
                    break
                widths[widest] -= 1
        else:
            extra = term_width - total
            i = 0
            while extra > 0:
                widths[COLUMN_IDS[i % len(COLUMN_IDS)]] += 1
                extra -= 1
                i += 1
        return widths

    # ---- cards ----
    @staticmethod
    def _meta_text(task: Task) -> str:
        return f"{task.priority} · {format_date(task.created_at)}"

    def _column_lines(self, tasks: List[Task], width: int, picked_up: Optional[str]) -> List[str]:
        th = self.theme
        if not tasks:
            return [th.color('(empty)', th.EMPTY_COLOR)]
        lines: List[str] = []
        for idx, task in enumerate(tasks):
            if idx:
                lines.append('')
            lines.extend(self._card_lines(task, width, task.id == picked_up))
        return lines

    def _card_lines(self, task: Task, width: int, held: bool) -> List[str]:
        th = self.theme
        sid = short_id(task.id)
        indent = ' ' * (len(sid) + 1)
        title_lines = wrap_words(task.title + (HELD_MARK if held else ''), width - len(indent)) or ['']
        col = th.COLUMN_COLOR.get(task.column_id, '')
        id_style = th.ID_COLOR + th.REVERSE if held else th.ID_COLOR
        out = [th.color(sid, id_style) + ' ' + th.color(title_lines[0], col)]
        out.extend(indent + th.color(line, col) for line in title_lines[1:])
        out.append(indent + th.color(task.priority, th.PRIORITY_COLOR.get(task.priority, ''))
                   + th.color(f" · {format_date(task.created_at)}", th.DIM))
        if task.description.strip():
            desc = wrap_words(task.description, width - len(indent))
            if len(desc) > DESCRIPTION_LINES:
                desc = desc[:DESCRIPTION_LINES]
                last = desc[-1]
                if len(last) + 1 > width - len(indent):
                    last = last[:-1]
                desc[-1] = last + '…'
            out.extend(indent + th.color(line, th.DIM) for line in desc)
        return out

    # ---- rendering ----
    def _rows(self, columns: Mapping[str, List[Task]], widths: Mapping[str, int],
              cells: Mapping[str, List[str]]) -> List[str]:
        th = self.theme
        header_cells = [
            _pad(th.color(self._header_text(cid, len(columns[cid])), th.HEADER_COLOR, th.BOLD), widths[cid])
            for cid in COLUMN_IDS
        ]
        out = [SEP.join(header_cells).rstrip(),
               SEP.join(th.color('-' * widths[cid], th.HEADER_COLOR) for cid in COLUMN_IDS)]
        rows = max(len(cells[cid]) for cid in COLUMN_IDS)
        for r in range(rows):
            row_cells = []
            for cid in COLUMN_IDS:
                col_lines = cells[cid]
                row_cells.append(_pad(col_lines[r] if r < len(col_lines) else '', widths[cid]))
            out.append(SEP.join(row_cells).rstrip())
        return out


def _pad(line: str, width: int) -> str:
    pad = width - visible_len(line)
    return line + ' ' * pad if pad > 0 else line
