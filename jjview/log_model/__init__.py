"""Commit records, the commit graph, and the log parser."""

from .graph import CommitGraph
from .parse import LOG_TEMPLATE, ParseResult, parse_log
from .types import Commit, CommitRole, ParseWarning

__all__ = [
    "Commit",
    "CommitGraph",
    "CommitRole",
    "LOG_TEMPLATE",
    "ParseResult",
    "ParseWarning",
    "parse_log",
]
