"""Low level scanning helpers for SQL-like statement text.

All helpers operate on a sequence of single characters (a ``str`` or a
``list`` of one-character strings), a start position ``i`` and an ``end``
bound. A missing character is represented by the empty string.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Sequence

PREFIX_COUNT = 6

_IDENTIFIER_RE = re.compile(r"[a-z_][a-z0-9_]{0,127}", re.IGNORECASE | re.ASCII)


@dataclass
class Var:
    """A variable reference found in statement text."""

    i: int
    end: int
    name: str
    quote: str = ""
    length: int = 0

    def __str__(self) -> str:
        if self.quote == "\\":
            return "\\" + self.name
        return ":" + self.quote + self.name + self.quote


def _is_control(c: str) -> bool:
    return bool(c) and unicodedata.category(c) == "Cc"


def _is_space(c: str) -> bool:
    return bool(c) and c.isspace() and c not in "\x1c\x1d\x1e\x1f"


def _is_letter(c: str) -> bool:
    return bool(c) and unicodedata.category(c).startswith("L")


def _is_number(c: str) -> bool:
    return bool(c) and unicodedata.category(c).startswith("N")


def is_space_or_control(c: str) -> bool:
    """Report whether c is whitespace or a control character."""
    return _is_space(c) or _is_control(c)


def runes_last_index(r: Sequence[str], needle: str) -> int:
    """Return the last index of needle in r, or -1."""
    for i in range(len(r) - 1, -1, -1):
        if r[i] == needle:
            return i
    return -1


def grab(r: Sequence[str], i: int, end: int) -> str:
    """Return r[i], or the empty string when i is past end."""
    return r[i] if i < end else ""


def find_space(r: Sequence[str], i: int, end: int) -> tuple[int, bool]:
    """Find the first space or control character at or after i."""
    while i < end:
        if is_space_or_control(r[i]):
            return i, True
        i += 1
    return i, False


def find_non_space(r: Sequence[str], i: int, end: int) -> tuple[int, bool]:
    """Find the first character at or after i that is not space or control."""
    while i < end:
        if not is_space_or_control(r[i]):
            return i, True
        i += 1
    return i, False


def find_rune(r: Sequence[str], i: int, end: int, c: str) -> tuple[int, bool]:
    """Find the next occurrence of c at or after i."""
    while i < end:
        if r[i] == c:
            return i, True
        i += 1
    return i, False


def is_empty_line(r: Sequence[str], i: int, end: int) -> bool:
    """Report whether r[i:end] holds only whitespace."""
    return not find_non_space(r, i, end)[1]


def read_dollar_and_tag(r: Sequence[str], i: int, end: int) -> tuple[str, int, bool]:
    """Read a ``$tag$`` starting at i, returning the tag, position and validity."""
    start, found = i, False
    i += 1
    while i < end:
        if r[i] == "$":
            found = True
            break
        if i - start > 128:
            break
        i += 1
    if not found:
        return "", i, False
    ident = "".join(r[start + 1:i])
    if ident and not _IDENTIFIER_RE.fullmatch(ident):
        return "", i, False
    return ident, i, True


def read_string(r: Sequence[str], i: int, end: int, quote: str, tag: str) -> tuple[int, bool]:
    """Seek to the end of a quoted string, returning its position and whether it ended."""
    prev = ""
    while i < end:
        c, nxt = r[i], grab(r, i + 1, end)
        if quote == "'" and c == "\\":
            i += 2
            prev = ""
            continue
        if quote == "'" and c == "'" and nxt == "'":
            i += 2
            continue
        if ((quote == "'" and c == "'" and prev != "'")
                or (quote == '"' and c == '"')
                or (quote == "`" and c == "`")):
            return i, True
        if quote == "$" and c == "$":
            ident, pos, ok = read_dollar_and_tag(r, i, end)
            if ok and tag == ident:
                return pos, True
        prev = c
        i += 1
    return end, False


def read_multiline_comment(r: Sequence[str], i: int, end: int) -> tuple[int, bool]:
    """Find the end of a ``/* ... */`` comment."""
    i += 1
    while i < end:
        if r[i - 1] == "*" and r[i] == "/":
            return i, True
        i += 1
    return end, False


def read_string_var(r: Sequence[str], i: int, end: int) -> Var | None:
    """Read a quoted variable such as ``:'name'``."""
    start, q = i, grab(r, i + 1, end)
    i += 2
    while i < end:
        if r[i] == q:
            if i - start < 3:
                return None
            return Var(i=start, end=i + 1, name="".join(r[start + 2:i]), quote=q)
        i += 1
    return None


def read_var(r: Sequence[str], i: int, end: int) -> Var | None:
    """Read a variable reference starting at i."""
    if grab(r, i, end) != ":" or grab(r, i + 1, end) == ":":
        return None
    if end - i < 2:
        return None
    if grab(r, i + 1, end) in ('"', "'"):
        return read_string_var(r, i, end)
    start = i
    i += 1
    while i < end:
        c = r[i]
        if c != "_" and not _is_letter(c) and not _is_number(c):
            break
        i += 1
    if i - start < 2:
        return None
    return Var(i=start, end=i, name="".join(r[start + 1:i]))


def read_command(r: Sequence[str], i: int, end: int) -> tuple[int, int]:
    """Return the end of the backslash command at i and the end of its parameters."""
    while i < end:
        nxt = grab(r, i + 1, end)
        if nxt == "":
            return end, end
        if nxt == "\\" or _is_control(nxt):
            i += 1
            return i, i
        if _is_space(nxt):
            i += 1
            break
        i += 1
    cmd, quote = i, ""
    while i < end:
        c, nxt = r[i], grab(r, i + 1, end)
        if nxt == "":
            return cmd, end
        if not quote and c in "'\"`":
            quote = c
        elif quote and c == quote:
            quote = ""
        elif quote and c == "\\" and nxt in (quote, "\\"):
            i += 1
        elif not quote and (c == "\\" or _is_control(c)):
            break
        i += 1
    return cmd, i


def _append_upper(s: list[str], r: Sequence[str], extra: str = "") -> list[str]:
    return s + [c.upper() for c in r] + list(extra)


def find_prefix(r: Sequence[str], n: int) -> str:
    """Find the upper-cased prefix of up to n words in r."""
    r = list(r)
    s: list[str] = []
    words = 0
    i, end = 0, len(r)
    while i < end:
        j, _ = find_non_space(r, i, end)
        if i != j:
            r, end, i = r[j:], end - j, 0
        c, nxt = grab(r, i, end), grab(r, i + 1, end)
        if c == "":
            pass
        elif c == ";":
            break
        elif (c == "-" and nxt == "-") or (c == "/" and nxt == "/"):
            if i != 0:
                s, words = _append_upper(s, r[:i], " "), words + 1
            i, _ = find_rune(r, i, end, "\n")
            if i < end:
                r, end, i = r[i + 1:], end - i - 1, -1
        elif c == "/" and nxt == "*":
            if i != 0:
                s, words = _append_upper(s, r[:i]), words + 1
            i += 2
            while i < end:
                if grab(r, i, end) == "*" and grab(r, i + 1, end) == "/":
                    r, end, i = r[i + 2:], end - i - 2, -1
                    break
                i += 1
            if end > 0 and s and is_space_or_control(r[0]) and not is_space_or_control(s[-1]):
                s.append(" ")
        elif words == n or not _is_letter(c):
            break
        elif nxt != "/" and not _is_letter(nxt):
            s, words = _append_upper(s, r[:i + 1], " "), words + 1
            if nxt == ";":
                break
            if nxt != "":
                r, end, i = r[i + 2:], end - i - 2, -1
        i += 1
    if s and s[-1] == " ":
        s = s[:-1]
    return "".join(s)


def substitute(r: Sequence[str], i: int, n: int, s: str) -> tuple[list[str], int]:
    """Replace n characters of r at i with s, returning the new list and length."""
    out = list(r[:i]) + list(s) + list(r[i + n:])
    return out, len(out)


def substitute_var(r: Sequence[str], v: Var, s: str) -> tuple[list[str], int]:
    """Replace the span of v in r with s, recording the replacement length on v."""
    v.length = len(s)
    out = list(r[:v.i]) + list(s) + list(r[v.end:])
    return out, len(out)