"""Render a ledger snapshot as availability lines."""

import sys
from typing import Iterable, TextIO

LINE_FORMAT = "{domain} has {percentage}% availability percentage"


def format_report(snapshot: Iterable[tuple[str, int]]) -> list[str]:
    """One line per domain, sorted by domain name."""
    return [
        LINE_FORMAT.format(domain=domain, percentage=pct)
        for domain, pct in sorted(snapshot)
    ]


def emit_report(
    snapshot: Iterable[tuple[str, int]], stream: TextIO | None = None
) -> None:
    out = stream or sys.stdout
    for line in format_report(snapshot):
        out.write(line + "\n")
    out.flush()
