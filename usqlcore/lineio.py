"""Line input and output for the interactive shell and scripted runs."""

from __future__ import annotations

import getpass
import os
import sys
from typing import IO, Callable

try:
    import readline as _readline
except ImportError:  # pragma: no cover - platform dependent
    _readline = None

_CTRL_Z = "\x1a"


class PasswordNotAvailableError(RuntimeError):
    """Raised when a password cannot be read from the input."""

    def __init__(self) -> None:
        super().__init__("password not available")


class LineIO:
    """Reads input lines and holds the output streams.

    With no ``stdin`` there is no input: ``next`` raises ``EOFError`` at once
    and ``password`` raises ``PasswordNotAvailableError``.
    """

    def __init__(
        self,
        stdin: IO[str] | None,
        stdout: IO[str],
        stderr: IO[str],
        *,
        interactive: bool = False,
        cygwin: bool = False,
        history_file: str = "",
    ) -> None:
        self._stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.interactive = interactive or cygwin
        self.cygwin = cygwin
        self.history_file = history_file
        self.history: list[str] = []
        self.auto_completer: Callable[[str, int], str | None] | None = None
        self.output_filter: Callable[[str], str] | None = None
        self._prompt = ""
        self._closers: list[Callable[[], object]] = []
        self._load_history()

    def _load_history(self) -> None:
        if not self.history_file or not os.path.isfile(self.history_file):
            return
        with open(self.history_file, encoding="utf-8") as f:
            self.history = [line.rstrip("\n") for line in f]
        if self._uses_readline():
            for line in self.history:
                _readline.add_history(line)

    def _uses_readline(self) -> bool:
        return (
            _readline is not None
            and self.interactive
            and self._stdin is sys.stdin
            and self.stdout is sys.stdout
        )

    def next(self) -> str:
        """Return the next input line without its newline; raise EOFError at the end."""
        if self._stdin is None:
            raise EOFError
        if self._uses_readline():
            line = input(self._prompt)
        else:
            if self.interactive and self._prompt:
                self.stdout.write(self._prompt)
                self.stdout.flush()
            line = self._stdin.readline()
            if not line:
                raise EOFError
            if line.endswith("\n"):
                line = line[:-1]
        return line.replace(_CTRL_Z, "")

    def close(self) -> None:
        """Release any resources opened for this IO."""
        closers, self._closers = self._closers, []
        for close in closers:
            try:
                close()
            except OSError:
                pass

    def prompt(self, s: str) -> None:
        """Set the prompt shown before the next interactive read."""
        self._prompt = s

    def completer(self, completer: Callable[[str, int], str | None] | None) -> None:
        """Set the auto-completion function."""
        self.auto_completer = completer
        if self._uses_readline():
            _readline.set_completer(completer)
            _readline.parse_and_bind("tab: complete")

    def save(self, line: str) -> None:
        """Record a line in the history, appending it to the history file."""
        self.history.append(line)
        if self._uses_readline():
            _readline.add_history(line)
        if self.history_file:
            with open(self.history_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def password(self, prompt: str) -> str:
        """Prompt for and return a password."""
        if self._stdin is None:
            raise PasswordNotAvailableError()
        if self.interactive and self._stdin is sys.stdin:
            return getpass.getpass(prompt, stream=self.stderr)
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self._stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    def set_output(self, f: Callable[[str], str] | None) -> None:
        """Set the function used to format edited lines for display."""
        self.output_filter = f

    def __enter__(self) -> LineIO:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def open_line_io(force_non_interactive: bool, out: str, history_file: str) -> LineIO:
    """Create the line IO for the process's standard streams.

    ``force_non_interactive`` disables input entirely; ``out`` redirects
    standard output to a file, which also turns off interactive mode.
    """
    interactive = sys.stdin.isatty() and sys.stdout.isatty()
    stdin: IO[str] | None = sys.stdin
    if force_non_interactive:
        interactive = False
        stdin = None
    stdout: IO[str] = sys.stdout
    out_file: IO[str] | None = None
    if out:
        out_file = open(out, "w", encoding="utf-8")
        stdout = out_file
        interactive = False
    lio = LineIO(
        stdin,
        stdout,
        sys.stderr,
        interactive=interactive,
        cygwin=False,
        history_file=history_file,
    )
    if out_file is not None:
        lio._closers.append(out_file.close)
    return lio