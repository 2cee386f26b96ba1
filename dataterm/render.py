from __future__ import annotations

from typing import List, Optional

from dataterm.formatting import display_width
from dataterm.rows import Row
from dataterm.screen import Color, Screen, Style, right_aligned_col
from dataterm.view import HEADER_ROWS

RULE = "═"
READ_ONLY_MARK = "*"
UNAVAILABLE = "N/A"

FRAME = Style(fg=Color.WHITE, bg=Color.BLACK)
NORMAL_ROW = Style(fg=Color.WHITE, bg=Color.BLACK)
SELECTED_ROW = Style(fg=Color.BLACK, bg=Color.WHITE)


def draw_header(screen: Screen, title: str, selected: int, total: int) -> None:
    screen.fill_row(0, RULE, FRAME)
    screen.fill_row(2, RULE, FRAME)
    screen.put_string(0, 1, title, FRAME)
    _rows, cols = screen.size()
    counter = f" {selected + 1}/{total} "
    screen.put_string(right_aligned_col(cols, counter), 1, counter, FRAME.with_bold())


def draw_status_bar(screen: Screen, text: Optional[str]) -> None:
    rows, _cols = screen.size()
    screen.fill_row(rows - 2, RULE, FRAME)
    if text:
        screen.put_string(0, rows - 1, text, FRAME)


def draw_overlay_border(screen: Screen, overlay_height: int) -> None:
    rows, _cols = screen.size()
    screen.fill_row(rows - 3 - overlay_height, RULE, FRAME)


def overlay_start_row(term_rows: int, overlay_height: int) -> int:
    return term_rows - overlay_height - 2


def draw_row(screen: Screen, screen_row: int, row: Row, *, selected: bool, highlighted: bool) -> None:
    if selected:
        style = SELECTED_ROW
        screen.fill_row(screen_row, " ", style)
    else:
        style = NORMAL_ROW

    if highlighted:
        style = style.with_fg(Color.MAGENTA if selected else Color.YELLOW)

    if row.read_only:
        screen.put_string(0, screen_row, READ_ONLY_MARK, style)
    screen.put_string(1, screen_row, f"{row.label}:", style)

    value_col = display_width(row.label) + 3
    if row.value is not None:
        value_style = style.with_fg(Color.BLACK if selected else Color.WHITE).with_bold()
        screen.put_string(value_col, screen_row, row.value, value_style)
    else:
        screen.put_string(value_col, screen_row, UNAVAILABLE, style.with_fg(Color.RED))


def draw_rows(
    screen: Screen,
    rows: List[Row],
    *,
    top: int,
    page_height: int,
    selected: int,
    now: float,
    highlight_s: float,
) -> None:
    """
    Draw the visible page of rows. Drawing a row marks its pending change as
    displayed, which starts that row's highlight window.
    """
    last = min(top + page_height, len(rows))
    screen_row = HEADER_ROWS
    for idx in range(top, last):
        row = rows[idx]
        row.mark_displayed(now)
        draw_row(
            screen,
            screen_row,
            row,
            selected=(idx == selected),
            highlighted=row.is_highlighted(now, highlight_s),
        )
        screen_row += 1
