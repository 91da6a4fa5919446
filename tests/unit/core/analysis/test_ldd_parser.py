from __future__ import annotations

"""
Unit tests for the dynamic-loader listing grammar.

Verifies:
1. Both bundle-carrying line shapes produce Edges in textual order.
2. Virtual objects, unresolved names and noise become Skips.
3. Parsing never raises on malformed input.
"""

import pytest

from depgather.core.analysis.ldd_parser import parse_line, parse_output
from depgather.domain.closure_models import Edge, Skip, SkipReason

SAMPLE = """\
\tlinux-vdso.so.1 (0x00007ffd4b7f2000)
\tlibssl.so.3 => /lib/x86_64-linux-gnu/libssl.so.3 (0x00007f3a1c000000)
\tlibfoo.so.2 => not found
\tlibc.so.6 => /lib/x86_64-linux-gnu/libc.so.6 (0x00007f3a1bc00000)
\t/lib64/ld-linux-x86-64.so.2 (0x00007f3a1c2a0000)
""".splitlines()


def test_arrow_form_yields_edge():
    parsed = parse_line("\tlibssl.so.3 => /usr/lib/libssl.so.3 (0x00007f3a1c000000)\n")
    assert parsed == Edge(path="/usr/lib/libssl.so.3", name="libssl.so.3", address="0x00007f3a1c000000")


def test_arrow_form_without_address():
    parsed = parse_line("libz.so.1 => /usr/lib/libz.so.1")
    assert isinstance(parsed, Edge)
    assert parsed.path == "/usr/lib/libz.so.1"
    assert parsed.address == ""


def test_direct_absolute_form_yields_edge():
    parsed = parse_line("\t/opt/app/lib/libbar.so (0x00007f0000000000)")
    assert parsed == Edge(path="/opt/app/lib/libbar.so", address="0x00007f0000000000")


def test_not_found_is_unresolved_skip():
    parsed = parse_line("\tlibfoo.so.2 => not found")
    assert isinstance(parsed, Skip)
    assert parsed.reason is SkipReason.UNRESOLVED
    assert parsed.name == "libfoo.so.2"


@pytest.mark.parametrize("line", [
    "\tlinux-vdso.so.1 (0x00007ffd4b7f2000)",
    "\tlinux-gate.so.1 =>  (0xb7f0c000)",
    "\t/lib64/ld-linux-x86-64.so.2 (0x00007f3a1c2a0000)",
    "\t/lib/ld-linux-aarch64.so.1 (0x0000ffff9a000000)",
])
def test_virtual_and_loader_entries_are_skipped(line):
    parsed = parse_line(line)
    assert isinstance(parsed, Skip)
    assert parsed.reason is SkipReason.VIRTUAL


@pytest.mark.parametrize("line", [
    "",
    "\tstatically linked",
    "\tnot a dynamic executable",
    "garbage => => =>",
    "libx.so => relative/path (0x1)",
])
def test_noise_is_unrecognized(line):
    parsed = parse_line(line)
    assert isinstance(parsed, Skip)
    assert parsed.reason is SkipReason.UNRECOGNIZED


def test_parse_output_preserves_order_and_length():
    parsed = parse_output(SAMPLE)
    assert len(parsed) == len(SAMPLE)
    assert [type(p) for p in parsed] == [Skip, Edge, Skip, Edge, Skip]
