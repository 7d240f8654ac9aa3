"""Output formatters for the taskview list command."""

from .base import FormatterProtocol
from .jsonl import JsonlFormatter
from .table import TableFormatter
from .tree import TreeFormatter

FORMATTERS: dict[str, type] = {
    "table": TableFormatter,
    "jsonl": JsonlFormatter,
    "tree": TreeFormatter,
}


def get_formatter(format_str: str) -> FormatterProtocol:
    """Parse format string and return configured formatter.

    Format string syntax: <name>[:<date_fmt>]

    Examples:
        "table"           -> TableFormatter()
        "table:%d/%m"     -> TableFormatter(date_fmt="%d/%m")
        "jsonl"           -> JsonlFormatter()
        "tree"            -> TreeFormatter()
    """
    name, _, date_fmt = format_str.partition(":")

    if name not in FORMATTERS:
        available = list(FORMATTERS.keys())
        raise ValueError(f"Unknown format: {name}. Available: {', '.join(available)}")

    cls = FORMATTERS[name]
    if name == "table" and date_fmt:
        return cls(date_fmt=date_fmt)
    return cls()


__all__ = [
    "FormatterProtocol",
    "TableFormatter",
    "JsonlFormatter",
    "TreeFormatter",
    "FORMATTERS",
    "get_formatter",
]
