"""Backslash command parameter decoding."""

from __future__ import annotations

from typing import Callable

from .parse import _is_space, find_non_space, grab, read_string, read_var, substitute

Unquote = Callable[[str, bool], "tuple[bool, str]"]


class UnterminatedQuotedStringError(ValueError):
    """Raised when a parameter has an unterminated quoted string."""

    def __init__(self) -> None:
        super().__init__("unterminated quoted string")


class Params:
    """Remaining command parameters to be decoded one at a time."""

    def __init__(self, params: str) -> None:
        self.r: list[str] = list(params)

    def __len__(self) -> int:
        return len(self.r)

    def get_raw(self) -> str:
        """Return and consume all remaining text unchanged."""
        s = "".join(self.r)
        self.r = []
        return s

    def get(self, unquote: Unquote) -> tuple[bool, str]:
        """Read the next parameter, substituting quoted strings and variables.

        unquote(text, is_var) returns (ok, replacement) and may raise.
        Returns (False, "") when no parameters remain.
        """
        i, _ = find_non_space(self.r, 0, len(self.r))
        if i >= len(self.r):
            return False, ""
        quote = ""
        start = i
        while i < len(self.r):
            size = len(self.r)
            c, nxt = self.r[i], grab(self.r, i + 1, size)
            if quote:
                st = i - 1
                i, ok = read_string(self.r, i, size, quote, "")
                if not ok:
                    break
                ok, z = unquote("".join(self.r[st:i + 1]), False)
                if ok:
                    self.r, _ = substitute(self.r, st, i - st + 1, z)
                    i = st + len(z) - 1
                quote = ""
            elif c in "'\"`":
                quote = c
            elif c == ":" and nxt != ":":
                v = read_var(self.r, i, size)
                if v is not None:
                    n = str(v)
                    ok, z = unquote(n[1:], True)
                    if ok:
                        self.r, _ = substitute(self.r, v.i, len(n), z)
                        i = v.i + len(z) - 1
                    else:
                        i += len(n) - 1
            elif _is_space(c):
                break
            i += 1
        if quote:
            raise UnterminatedQuotedStringError()
        value = "".join(self.r[start:i])
        self.r = self.r[i:]
        return True, value

    def get_all(self, unquote: Unquote) -> list[str]:
        """Read all remaining parameters."""
        values = []
        while True:
            ok, v = self.get(unquote)
            if not ok:
                return values
            values.append(v)