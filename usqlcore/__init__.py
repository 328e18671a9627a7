"""Statement buffering, command parameter parsing, line I/O and driver build tags for an SQL client."""

__version__ = "0.1.0"