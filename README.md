# usqlcore

Building blocks for a psql-style interactive SQL client:

- **Statement buffering** (`usqlcore.statement.Statement`): reads input line by
  line from a callable you supply, tracks quoted strings (`'…'`, `"…"`, and
  optionally `$tag$…$tag$`), multiline, C-style and hash comments and
  parenthesis balance, and returns when a statement is terminated by `;` or a
  backslash command such as `\g` has been read. Variables written as `:name`,
  `:'name'` or `:"name"` are interpolated as the text is read, and
  `raw_string()` gives the statement back with them restored. `state()`
  reports the parse state as one character (`=`, `-`, `(`, `*` or the open
  quote).
- **Scanning helpers** (`usqlcore.parse`): string and comment scanning,
  variable detection (`read_var`, returning a `Var`), backslash command
  splitting (`read_command`) and statement prefix detection (`find_prefix`).
- **Command parameters** (`usqlcore.params.Params`): splits the text after a
  backslash command into arguments, honouring quotes and substituting
  variables through a callback you provide.
- **Command options** (`usqlcore.options`): `Option` with its `ExecType`,
  `Option.parse_params` for `(name=value ...)` format options, the `Handler`
  protocol, and `CommandParams`, which reads a command's arguments through a
  handler's `unquote` callback.
- **Line I/O** (`usqlcore.lineio`): `LineIO` reads lines (using `readline`
  when interactive on the real terminal), keeps history in a file, prompts for
  passwords; `open_line_io` builds one for the process's standard streams.
- **Driver build tags** (`usqlcore.buildtags`): the mapping between driver
  names and their build tags.

## Installing

```
pip install .
```

Install the test extra and run the tests with:

```
pip install ".[test]"
pytest
```

## Reading statements

The source callable returns one line at a time and raises `EOFError` when
input is exhausted.

```python
from usqlcore.statement import Statement

lines = iter(["select 1\\g"])

def source():
    try:
        return next(lines)
    except StopIteration:
        raise EOFError

def unquote(name, is_var):
    return False, ""

stmt = Statement(source, allow_dollar=True, allow_multiline_comments=True)
cmd, params = stmt.next(unquote)
print(cmd, str(stmt))   # \g select 1
```

## Splitting command arguments

An unquote callback receives either a quoted string (with its quotes) or a
variable name, plus a flag telling which it is, and returns a pair
`(substituted, value)`. Returning `False` leaves the text as it was.

```python
from usqlcore.params import Params

variables = {"foo": "bar"}

def unquote(text, is_var):
    if is_var:
        return text in variables, variables.get(text, "")
    return False, text

print(Params(" :foo 'x' ").get_all(unquote))   # ['bar', "'x'"]
```

An opening quote with no closing quote raises
`usqlcore.params.UnterminatedQuotedStringError`.

## Finding a statement's prefix

```python
from usqlcore.parse import find_prefix

print(find_prefix("begin transaction\n\tinsert into x;\ncommit;", 6))
# BEGIN TRANSACTION INSERT INTO X
```

## Build tags

```python
from usqlcore.buildtags import build_tag_for, driver_for_tag

build_tag_for("cassandra")   # 'cql'
driver_for_tag("hdb")        # 'saphana'
```

## What this package does not do

It has no table of backslash commands: it can split a command from its
parameters and parse those parameters, but it does not decide what `\d`,
`\set` or any other command does, and it prints no help listing. It does not
connect to databases or run queries, provides no syntax highlighting, and
installs no command-line program.