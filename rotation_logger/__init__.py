"""Rotating tee: copy standard input to standard output and a rotating set of log files."""

__version__ = "1.1.5"
