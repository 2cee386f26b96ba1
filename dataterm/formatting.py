from __future__ import annotations

import unicodedata


def clamp(v: int, lo: int, hi: int) -> int:
    if hi < lo:
        return lo
    return max(lo, min(hi, v))


def _char_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def display_width(s: str) -> int:
    """Number of terminal columns `s` occupies (CJK wide chars count as 2)."""
    return sum(_char_width(ch) for ch in s)


def truncate_to_width(s: str, width: int) -> str:
    if width <= 0:
        return ""
    out = []
    used = 0
    for ch in s:
        w = _char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)
