"""A reusable statement buffer that reads and parses SQL-like statements."""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from .parse import (
    PREFIX_COUNT,
    Var,
    find_non_space,
    find_prefix,
    grab,
    is_empty_line,
    read_command,
    read_dollar_and_tag,
    read_multiline_comment,
    read_string,
    read_var,
    substitute_var,
)

Source = Callable[[], "str | Sequence[str]"]
Unquote = Callable[[str, bool], "tuple[bool, str]"]

_LINE_END = "\n"


def _try_unquote(unquote: Unquote, text: str) -> tuple[bool, str]:
    try:
        return unquote(text, True)
    except ValueError:
        return False, ""


class Statement:
    """Collects lines from a source until a statement or a command is complete.

    ``source`` is called with no arguments and returns the next line (without
    its trailing newline); it raises ``EOFError`` when no input remains.
    """

    def __init__(
        self,
        source: Source,
        *,
        allow_dollar: bool = False,
        allow_multiline_comments: bool = False,
        allow_c_comments: bool = False,
        allow_hash_comments: bool = False,
    ) -> None:
        self._source = source
        self._allow_dollar = allow_dollar
        self._allow_multiline_comments = allow_multiline_comments
        self._allow_c_comments = allow_c_comments
        self._allow_hash_comments = allow_hash_comments
        self.buf: list[str] | None = None
        self.prefix = ""
        self.vars: list[Var] = []
        self._r: list[str] = []
        self._quote = ""
        self._quote_tag = ""
        self._multiline_comment = False
        self._balance = 0
        self._ready = False

    @property
    def length(self) -> int:
        """Number of characters collected in the buffer."""
        return len(self.buf) if self.buf else 0

    def __str__(self) -> str:
        return "".join(self.buf) if self.buf else ""

    def raw_string(self) -> str:
        """Return the buffer with interpolated variables restored."""
        if self.length == 0:
            return ""
        s = str(self)
        parts: list[str] = []
        i = 0
        for v in self.vars:
            if v.length == 0:
                continue
            if len(s) > i:
                parts.append(s[i:v.i])
            if v.quote != "\\":
                parts.append(":")
            parts.append(v.quote)
            parts.append(v.name)
            if v.quote and v.quote != "\\":
                parts.append(v.quote)
            i = v.i + v.length
        if len(s) > i:
            parts.append(s[i:])
        return "".join(parts)

    def ready(self) -> bool:
        """Report whether a complete, terminated statement has been collected."""
        return self._ready

    def reset(self, r: Iterable[str] | None = None) -> None:
        """Clear the buffer and parse state, optionally replacing pending input."""
        self.buf, self.prefix, self.vars = None, "", []
        self._quote, self._quote_tag = "", ""
        self._multiline_comment = False
        self._balance = 0
        self._ready = False
        if r is not None:
            self._r = list(r)

    def next(self, unquote: Unquote) -> tuple[str, str]:
        """Parse input until a statement ends or a command is read.

        Returns the command (empty when none) and its raw parameters.
        ``unquote(name, True)`` returns ``(ok, value)`` for variables; a
        ``ValueError`` from it leaves the variable in place.
        """
        if not self._r:
            self._r = list(self._source())
        r = self._r
        cmd = params = ""
        i = 0
        while i < len(r):
            size = len(r)
            c, nxt = r[i], grab(r, i + 1, size)
            if self._quote:
                i, ok = read_string(r, i, size, self._quote, self._quote_tag)
                if ok:
                    self._quote, self._quote_tag = "", ""
            elif self._multiline_comment:
                i, ok = read_multiline_comment(r, i, size)
                self._multiline_comment = not ok
            elif c in ("'", '"'):
                self._quote = c
            elif self._allow_dollar and c == "$":
                tag, i, ok = read_dollar_and_tag(r, i, size)
                if ok:
                    self._quote, self._quote_tag = "$", tag
            elif c == "-" and nxt == "-":
                i = size
            elif self._allow_c_comments and c == "/" and nxt == "/":
                i = size
            elif self._allow_hash_comments and c == "#":
                i = size
            elif self._allow_multiline_comments and c == "/" and nxt == "*":
                self._multiline_comment = True
                i += 1
            elif c == ":" and nxt != ":":
                v = read_var(r, i, size)
                if v is not None:
                    self.vars.append(v)
                    ok, z = _try_unquote(unquote, v.quote + v.name + v.quote)
                    if ok:
                        r, _ = substitute_var(r, v, z)
                        i -= 1
                    if self.length:
                        v.i += self.length + 1
            elif c == "(":
                self._balance += 1
            elif c == ")":
                self._balance = max(0, self._balance - 1)
            elif self._balance:
                pass
            elif c == "\\" and nxt in ("\\", ";", ":"):
                v = Var(i=i, end=i + 2, name=nxt, quote="\\")
                self.vars.append(v)
                r, _ = substitute_var(r, v, nxt)
                if self.length:
                    v.i += self.length + 1
            elif c == "\\":
                cend, pend = read_command(r, i, size)
                cmd, params = "".join(r[i:cend]), "".join(r[cend:pend])
                r = r[:i] + r[pend:]
                break
            elif c == ";":
                self._ready = True
                i += 1
                break
            i += 1
        i = min(i, len(r))
        empty = is_empty_line(r, 0, i)
        append_line = bool(self._quote) or self._multiline_comment or not empty
        if not self._multiline_comment and cmd and empty:
            append_line = False
        if append_line:
            st = find_non_space(r, 0, i)[0] if self.length == 0 else 0
            self.append(r[st:i], _LINE_END)
        self.prefix = find_prefix(self.buf or [], PREFIX_COUNT)
        self._r = r[i:]
        return cmd, params

    def append(self, r: Iterable[str], sep: Iterable[str]) -> None:
        """Append r to the buffer, preceded by sep unless the buffer is unset."""
        if self.buf is None:
            self.buf = list(r)
            return
        self.buf.extend(sep)
        self.buf.extend(r)

    def append_string(self, s: str, sep: str) -> None:
        """Append the string s, preceded by sep."""
        self.append(s, sep)

    def state(self) -> str:
        """Return a one-character description of the parse state."""
        if self._quote:
            return self._quote
        if self._multiline_comment:
            return "*"
        if self._balance:
            return "("
        if self.length:
            return "-"
        return "="