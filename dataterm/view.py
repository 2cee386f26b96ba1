from __future__ import annotations

from dataterm.formatting import clamp
from dataterm.keys import KeyEvent, KeyType

# Header: rule, title line, rule.
HEADER_ROWS = 3
# Status bar: rule, status line.
STATUS_ROWS = 2


def compute_page_height(term_rows: int, overlay_height: int = 0, *, has_overlay: bool = False) -> int:
    """
    Rows left for records after the header, the status bar and (when an overlay is
    active) the overlay body plus its separator rule.
    """
    used = HEADER_ROWS + STATUS_ROWS
    if has_overlay:
        used += overlay_height + 1
    return term_rows - used


class ViewState:
    def __init__(self) -> None:
        self.selected = 0
        self.top = 0
        self.page_height = 0

    def reset(self) -> None:
        self.selected = 0
        self.top = 0

    def ensure_visible(self, n_items: int) -> None:
        """Scroll so the selected row is on the page, then clamp `top`."""
        # A terminal too small for any row still keeps the selection "on" the page.
        page = max(1, self.page_height)
        if self.top > self.selected:
            self.top = self.selected
        if self.selected >= self.top + page:
            self.top = self.selected - page + 1
        self.top = clamp(self.top, 0, max(0, n_items - page))

    def navigate(self, key: KeyEvent, n_items: int) -> bool:
        """Apply a navigation key. Returns True if the key was a navigation key."""
        if n_items <= 0:
            return False
        # Paging on a terminal too small for any row still moves by one.
        page = max(1, self.page_height)
        kt = key.type
        if kt is KeyType.ARROW_DOWN:
            self.selected = min(self.selected + 1, n_items - 1)
        elif kt is KeyType.ARROW_UP:
            self.selected = max(self.selected - 1, 0)
        elif kt is KeyType.PAGE_UP:
            self.top = max(self.top - page, 0)
            self.selected = max(self.selected - page, 0)
        elif kt is KeyType.PAGE_DOWN:
            # `top` may overshoot here; ensure_visible() clamps it on the next redraw.
            self.top += page
            self.selected = min(self.selected + page, n_items - 1)
        else:
            return False
        return True
