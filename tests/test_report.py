"""Unit tests for report rendering."""

import io

from endpoint_monitor.report import emit_report, format_report


def test_line_format():
    assert format_report([("a.com", 100)]) == [
        "a.com has 100% availability percentage"
    ]


def test_sorted_by_domain():
    lines = format_report([("z.com", 1), ("a.com", 2), ("m.com", 3)])
    assert lines == [
        "a.com has 2% availability percentage",
        "m.com has 3% availability percentage",
        "z.com has 1% availability percentage",
    ]


def test_empty_snapshot():
    assert format_report([]) == []


def test_emit_writes_lines():
    out = io.StringIO()
    emit_report([("b.com", 0), ("a.com", 50)], out)
    assert out.getvalue() == (
        "a.com has 50% availability percentage\n"
        "b.com has 0% availability percentage\n"
    )


def test_emit_defaults_to_stdout(capsys):
    emit_report([("c.com", 50)])
    assert capsys.readouterr().out == "c.com has 50% availability percentage\n"
