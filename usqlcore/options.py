"""Parsed options and parameter access for backslash commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, Any, Callable, Protocol, Sequence

from .params import Params

if TYPE_CHECKING:
    from .lineio import LineIO
    from .statement import Statement

Unquote = Callable[[str, bool], "tuple[bool, str]"]


class ExecType(enum.IntEnum):
    """The kind of execution a command asks for."""

    NONE = 0
    ONLY = 1
    PIPE = 2
    SET = 3
    EXEC = 4
    CROSSTAB = 5
    WATCH = 6


class InvalidFormatOptionError(ValueError):
    """Raised when a parenthesised format option has no value."""

    def __init__(self) -> None:
        super().__init__("invalid format option")


@dataclass
class Option:
    """Result options produced by running a command."""

    quit: bool = False
    exec: ExecType = ExecType.NONE
    params: dict[str, str] = field(default_factory=dict)
    crosstab: list[str] = field(default_factory=list)
    watch: float = 0.0

    def parse_params(self, params: Sequence[str], default_key: str) -> None:
        """Parse ``(name=value ...)`` format options; the rest goes to default_key."""
        in_options = False
        for pos, param in enumerate(params):
            if not param:
                continue
            if not in_options:
                if param.startswith("("):
                    in_options = True
                else:
                    self.params[default_key] = " ".join(params[pos:])
                    return
            name, sep, value = param.partition("=")
            if not sep:
                raise InvalidFormatOptionError()
            self.params[name.lstrip("(")] = value.rstrip(")")
            if param.endswith(")"):
                in_options = False


class Handler(Protocol):
    """The interface a command handler offers to commands."""

    @property
    def io(self) -> "LineIO": ...

    def user(self) -> Any: ...

    def url(self) -> Any: ...

    def db(self) -> Any: ...

    def last(self) -> str: ...

    def last_raw(self) -> str: ...

    def buf(self) -> "Statement": ...

    def reset(self, r: str | None) -> None: ...

    def open(self, *params: str) -> None: ...

    def close(self) -> None: ...

    def change_password(self, user: str) -> str: ...

    def read_var(self, typ: str, prompt: str) -> str: ...

    def include(self, path: str, relative: bool) -> None: ...

    def begin(self, options: Any) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def highlight(self, w: IO[str], s: str) -> None: ...

    def get_timing(self) -> bool: ...

    def set_timing(self, enabled: bool) -> None: ...

    def get_output(self) -> IO[str] | None: ...

    def set_output(self, out: IO[str] | None) -> None: ...

    def metadata_writer(self) -> Any: ...

    def print(self, fmt: str, *args: Any) -> None: ...

    def unquote(self, exec_: bool) -> Unquote: ...


class CommandParams:
    """The parameters of one command invocation, decoded on demand."""

    def __init__(self, handler: Handler, name: str, params: Params | str) -> None:
        self.handler = handler
        self.name = name
        self.params = params if isinstance(params, Params) else Params(params)
        self.option = Option()

    def get(self, exec_: bool) -> str:
        """Return the next parameter, or an empty string when none remain."""
        return self.get_ok(exec_)[1]

    def get_ok(self, exec_: bool) -> tuple[bool, str]:
        """Return whether a parameter was read, and its value."""
        return self.params.get(self.handler.unquote(exec_))

    def get_optional(self, exec_: bool) -> tuple[bool, str]:
        """Return the next parameter, flagging and stripping a leading '-'."""
        v = self.get(exec_)
        if v.startswith("-"):
            return True, v[1:]
        return False, v

    def get_all(self, exec_: bool) -> list[str]:
        """Return all remaining parameters."""
        return self.params.get_all(self.handler.unquote(exec_))

    def get_raw(self) -> str:
        """Return the remaining parameter text without any processing."""
        return self.params.get_raw()