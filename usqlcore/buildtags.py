"""Known database driver names and their build tags."""

from __future__ import annotations

_KNOWN = {
    "adodb": "adodb",
    "athena": "athena",
    "avatica": "avatica",
    "bigquery": "bigquery",
    "cassandra": "cql",
    "clickhouse": "clickhouse",
    "cosmos": "cosmos",
    "couchbase": "n1ql",
    "csvq": "csvq",
    "exasol": "exasol",
    "firebird": "firebirdsql",
    "genji": "genji",
    "godror": "godror",
    "h2": "h2",
    "hive": "hive",
    "ignite": "ignite",
    "impala": "impala",
    "maxcompute": "maxcompute",
    "moderncsqlite": "moderncsqlite",
    "mymysql": "mymysql",
    "mysql": "mysql",
    "netezza": "nzgo",
    "odbc": "odbc",
    "oracle": "oracle",
    "pgx": "pgx",
    "postgres": "postgres",
    "presto": "presto",
    "ql": "ql",
    "sapase": "tds",
    "saphana": "hdb",
    "snowflake": "snowflake",
    "spanner": "spanner",
    "sqlite3": "sqlite3",
    "sqlserver": "sqlserver",
    "trino": "trino",
    "vertica": "vertica",
    "voltdb": "voltdb",
}


def known_build_tags() -> dict[str, str]:
    """Return a mapping of known driver names to build tags."""
    return dict(_KNOWN)


def build_tag_for(driver: str) -> str:
    """Return the build tag for driver, or driver itself when unknown."""
    return _KNOWN.get(driver, driver)


def driver_for_tag(tag: str) -> str:
    """Return the driver name for a build tag, or tag itself when unknown."""
    for driver, t in _KNOWN.items():
        if t == tag:
            return driver
    return tag