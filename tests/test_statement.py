import pytest

from usqlcore.statement import Statement


def lines(text):
    parts = iter(text.split("\n"))

    def source():
        try:
            return next(parts)
        except StopIteration:
            raise EOFError from None

    return source


def no_unquote(s, is_var):
    return False, ""


def make(text, **kwargs):
    opts = dict(allow_dollar=True, allow_multiline_comments=True, allow_c_comments=True)
    opts.update(kwargs)
    return Statement(lines(text), **opts)


def run(b, unquote=no_unquote):
    stmts, cmds, var_names = [], [], []
    while True:
        try:
            cmd, params = b.next(unquote)
        except EOFError:
            break
        var_names.extend(v.name for v in b.vars)
        if b.ready() or cmd == "\\g":
            stmts.append(str(b))
            b.reset()
        cmds.append(cmd + "|" + params)
    return stmts, cmds or ["|"], var_names


APPEND_CASES = [
    ([""], "", 0),
    (["", ""], "\n", 1),
    (["", "", ""], "\n\n", 2),
    (["", "", "", ""], "\n\n\n", 3),
    (["a", ""], "a\n", 2),
    (["a", "b", ""], "a\nb\n", 4),
    (["a", "b", "c", ""], "a\nb\nc\n", 6),
    (["", "a", ""], "\na\n", 3),
    (["", "a", "b", ""], "\na\nb\n", 5),
    (["", "a", "b", "c", ""], "\na\nb\nc\n", 7),
    (["", "foo"], "\nfoo", 4),
    (["", "foo", ""], "\nfoo\n", 5),
    (["foo", "", "bar"], "foo\n\nbar", 8),
    (["", "foo", "bar"], "\nfoo\nbar", 8),
    (["a" * 512], "a" * 512, 512),
    (["a" * 512, "a" * 512], "a" * 512 + "\n" + "a" * 512, 1025),
    (["a" * 512] * 3, "a" * 512 + "\n" + "a" * 512 + "\n" + "a" * 512, 1538),
    (["a" * 512, ""], "a" * 512 + "\n", 513),
    (["a" * 512, "", "foo"], "a" * 512 + "\n\nfoo", 517),
]


@pytest.mark.parametrize("parts,expected,length", APPEND_CASES)
def test_append(parts, expected, length):
    b = Statement(lines(""))
    for s in parts:
        b.append_string(s, "\n")
    assert str(b) == expected
    assert b.length == length
    b.reset()
    assert b.length == 0
    b.append_string("", "\n")
    assert str(b) == ""


def test_varied_separator():
    b = Statement(lines(""))
    b.append_string("foo", "\n")
    b.append_string("foo", "bar")
    assert b.length == 9
    assert str(b) == "foobarfoo"


NEXT_CASES = [
    ("", [], ["|"], "=", []),
    (";", [";"], ["|"], "=", []),
    (" ; ", [";"], ["|", "|"], "=", []),
    (r" \v ", [], [r"\v| "], "=", []),
    (r" \v \p", [], [r"\v| ", r"\p|"], "=", []),
    (r" \v   foo   \p", [], [r"\v|   foo   ", r"\p|"], "=", []),
    (r" \v   foo   bar  \p   zz", [], [r"\v|   foo   bar  ", r"\p|   zz"], "=", []),
    (r" \very   foo   bar  \print   zz", [], [r"\very|   foo   bar  ", r"\print|   zz"], "=", []),
    ("select 1;", ["select 1;"], ["|"], "=", []),
    (r"select 1\g", ["select 1"], [r"\g|"], "=", []),
    (r"select 1 \g", ["select 1 "], [r"\g|"], "=", []),
    (r" select 1 \g", ["select 1 "], [r"\g|"], "=", []),
    (r" select 1   \g  ", ["select 1   "], [r"\g|  "], "=", []),
    (r"select 1; select 1\g", ["select 1;", "select 1"], ["|", r"\g|"], "=", []),
    ("select 1\n\\g", ["select 1"], ["|", r"\g|"], "=", []),
    ("select 1 \\g\n\n\n\n\\v", ["select 1 "], [r"\g|", "|", "|", "|", r"\v|"], "=", []),
    (
        "select 1 \\g\n\n\n\n\\v aoeu \\p zzz \n\n",
        ["select 1 "],
        [r"\g|", "|", "|", "|", r"\v| aoeu ", r"\p| zzz ", "|", "|"],
        "=",
        [],
    ),
    (
        " select 1 \\g \\p \n select (15)\\g",
        ["select 1 ", "select (15)"],
        [r"\g| ", r"\p| ", r"\g|"],
        "=",
        [],
    ),
    (" select 1 (  \\g ) \n ;", ["select 1 (  \\g ) \n ;"], ["|", "|"], "=", []),
    (
        " select 1\n;select 2\\g  select 3;  \\p   \\z  foo bar ",
        ["select 1\n;", "select 2"],
        ["|", "|", r"\g|  select 3;  ", r"\p|   ", r"\z|  foo bar "],
        "=",
        [],
    ),
    (
        " select 1\\g\n\n\tselect 2\\g\n select 3;  \\p   \\z  foo bar \\p\\p select * from;  \n\\p",
        ["select 1", "select 2", "select 3;"],
        [r"\g|", "|", r"\g|", "|", r"\p|   ", r"\z|  foo bar ", r"\p|", r"\p| select * from;  ", r"\p|"],
        "=",
        [],
    ),
    ("select '';", ["select '';"], ["|"], "=", []),
    ("select 'a''b\nz';", ["select 'a''b\nz';"], ["|", "|"], "=", []),
    ("select 'a' 'b\nz';", ["select 'a' 'b\nz';"], ["|", "|"], "=", []),
    ('select "";', ['select "";'], ["|"], "=", []),
    ('select "\n";', ['select "\n";'], ["|", "|"], "=", []),
    ("select $$$$;", ["select $$$$;"], ["|"], "=", []),
    ("select $$\naoeu(\n$$;", ["select $$\naoeu(\n$$;"], ["|", "|", "|"], "=", []),
    ("select $tag$$tag$;", ["select $tag$$tag$;"], ["|"], "=", []),
    ("select $tag$\n\n$tag$;", ["select $tag$\n\n$tag$;"], ["|", "|", "|"], "=", []),
    ("select $tag$\n(\n$tag$;", ["select $tag$\n(\n$tag$;"], ["|", "|", "|"], "=", []),
    ("select $tag$\n\\v(\n$tag$;", ["select $tag$\n\\v(\n$tag$;"], ["|", "|", "|"], "=", []),
    ("select $tag$\n\\v(\n$tag$\\g", ["select $tag$\n\\v(\n$tag$"], ["|", "|", r"\g|"], "=", []),
    (
        "select $$\n\\v(\n$tag$$zz$$\\g$$\\g",
        ["select $$\n\\v(\n$tag$$zz$$\\g$$"],
        ["|", "|", r"\g|"],
        "=",
        [],
    ),
    ("select * --\n\\v", [], ["|", r"\v|"], "-", []),
    ("select--", [], ["|"], "-", []),
    ("select --", [], ["|"], "-", []),
    ("select /**/", [], ["|"], "-", []),
    ("select/* */", [], ["|"], "-", []),
    ("select/*", [], ["|"], "*", []),
    ("select /*", [], ["|"], "*", []),
    ("select * /**/", [], ["|"], "-", []),
    ("select * /* \n\n\n--*/\n;", ["select * /* \n\n\n--*/\n;"], ["|"] * 5, "=", []),
    ("select * /* \n\n\n--*/\n", [], ["|"] * 5, "-", []),
    ("select * /* \n\n\n--\n", [], ["|"] * 5, "*", []),
    ("\\p \\p\nselect (", [], [r"\p| ", r"\p|", "|"], "(", []),
    ("\\p \\p\nselect ()", [], [r"\p| ", r"\p|", "|"], "-", []),
    ("\n             \t\t               \n", [], ["|", "|", "|"], "=", []),
    ("\n   aoeu      \t\t               \n", [], ["|", "|", "|"], "-", []),
    ("$$", [], ["|"], "$", []),
    ("$$foo", [], ["|"], "$", []),
    ("'", [], ["|"], "'", []),
    ("(((()()", [], ["|"], "(", []),
    ('"', [], ["|"], '"', []),
    ('"foo', [], ["|"], '"', []),
    (":a :b", [], ["|"], "-", ["a", "b"]),
    ("select :'a b' :\"foo bar\"", [], ["|"], "-", ["a b", "foo bar"]),
    ("select :a:b;", ["select :a:b;"], ["|"], "=", ["a", "b"]),
    ("select :'a\n:foo:bar", [], ["|", "|"], "'", []),
    ("select :''\n:foo:bar\\g", ["select :''\n:foo:bar"], ["|", r"\g|"], "=", ["foo", "bar"]),
    ("select :''\n:foo :bar\\g", ["select :''\n:foo :bar"], ["|", r"\g|"], "=", ["foo", "bar"]),
    ("select :''\n :foo :bar \\g", ["select :''\n :foo :bar "], ["|", r"\g|"], "=", ["foo", "bar"]),
    ("select :'a\n:'foo':\"bar\"", [], ["|", "|"], "'", []),
    (
        "select :''\n:'foo':\"bar\"\\g",
        ["select :''\n:'foo':\"bar\""],
        ["|", r"\g|"],
        "=",
        ["foo", "bar"],
    ),
    (
        "select :''\n:'foo' :\"bar\"\\g",
        ["select :''\n:'foo' :\"bar\""],
        ["|", r"\g|"],
        "=",
        ["foo", "bar"],
    ),
    (
        "select :''\n :'foo' :\"bar\" \\g",
        ["select :''\n :'foo' :\"bar\" "],
        ["|", r"\g|"],
        "=",
        ["foo", "bar"],
    ),
    (r"select 1\echo 'pg://':foo'/':bar", [], [r"\echo| 'pg://':foo'/':bar"], "-", []),
    (r"select :'foo'\echo 'pg://':bar'/' ", [], [r"\echo| 'pg://':bar'/' "], "-", ["foo"]),
    (r"select 1\g '\g", ["select 1"], [r"\g| '\g"], "=", []),
    (r'select 1\g "\g', ["select 1"], [r'\g| "\g'], "=", []),
    ("select 1\\g `\\g", ["select 1"], ["\\g| `\\g"], "=", []),
    (r"select 1\g '\g ", ["select 1"], [r"\g| '\g "], "=", []),
    (r'select 1\g "\g ', ["select 1"], [r'\g| "\g '], "=", []),
    ("select 1\\g `\\g ", ["select 1"], ["\\g| `\\g "], "=", []),
]


@pytest.mark.parametrize("text,stmts,cmds,state,var_names", NEXT_CASES)
def test_next_reset_state(text, stmts, cmds, state, var_names):
    b = make(text)
    got_stmts, got_cmds, got_vars = run(b)
    assert got_stmts == stmts
    assert got_cmds == cmds
    assert b.state() == state
    assert len(got_vars) == len(var_names)
    for name in var_names:
        assert name in got_vars
    b.reset()
    assert str(b) == ""
    assert b.length == 0
    assert b.vars == []
    assert b.prefix == ""
    assert b.state() == "="
    assert b.ready() is False


def test_next_raises_eof_when_source_exhausted():
    b = make("")
    assert b.next(no_unquote) == ("", "")
    with pytest.raises(EOFError):
        b.next(no_unquote)


def test_prefix_is_detected():
    b = make("select 1;")
    b.next(no_unquote)
    assert b.ready()
    assert b.prefix == "SELECT"


def sub_foo(s, is_var):
    if s == "foo":
        return True, "bar"
    if s == "'foo'":
        return True, "'bar'"
    return False, ""


def test_variable_substitution_and_raw_string():
    b = make("select :foo;")
    b.next(sub_foo)
    assert str(b) == "select bar;"
    assert b.raw_string() == "select :foo;"


def test_quoted_variable_raw_string():
    b = make("select :'foo';")
    b.next(sub_foo)
    assert str(b) == "select 'bar';"
    assert b.raw_string() == "select :'foo';"


def test_variable_on_second_line_raw_string():
    b = make("select 1\n:foo;")
    b.next(sub_foo)
    b.next(sub_foo)
    assert b.ready()
    assert str(b) == "select 1\nbar;"
    assert b.raw_string() == "select 1\n:foo;"


def test_escaped_colon():
    b = make(r"select \:x;")
    b.next(no_unquote)
    assert str(b) == "select :x;"
    assert b.raw_string() == r"select \:x;"


def test_unquote_error_leaves_variable():
    def failing(s, is_var):
        raise ValueError("bad")

    b = make("select :foo;")
    b.next(failing)
    assert str(b) == "select :foo;"
    assert [v.name for v in b.vars] == ["foo"]


def test_hash_comments():
    b = make("select 1 # x;", allow_hash_comments=True)
    b.next(no_unquote)
    assert not b.ready()
    assert str(b) == "select 1 # x;"
    assert b.state() == "-"
    plain = make("select 1 # x;")
    plain.next(no_unquote)
    assert plain.ready()


def test_dollar_not_allowed_by_default():
    b = Statement(lines("select $$;"))
    b.next(no_unquote)
    assert b.ready()
    assert str(b) == "select $$;"


def test_reset_with_pending_input():
    b = make("")
    b.next(no_unquote)
    b.reset("select 2;")
    b.next(no_unquote)
    assert b.ready()
    assert str(b) == "select 2;"