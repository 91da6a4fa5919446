from __future__ import annotations

"""
Dynamic-Loader Listing Grammar.

The loader's dependency listing is loosely structured text. Two line shapes
carry a library to bundle:

    libfoo.so.1 => /usr/lib/libfoo.so.1 (0x00007f...)
    /lib64/ld-linux-x86-64.so.2 (0x00007f...)

Every other line (virtual objects, unresolved names, 'statically linked',
blank or malformed text) becomes a Skip. Parsing never raises.
"""

import re
from typing import Iterable, List

from depgather.domain.closure_models import Edge, ParsedLine, Skip, SkipReason
from depgather.domain.constants import VIRTUAL_ENTRY_PATTERNS

_ADDRESS = r"(?:\s+\((?P<address>0x[0-9a-fA-F]+)\))?"

# name => /resolved/path (0xADDR)
_ARROW_RX = re.compile(
    r"^\s*(?P<name>\S+)\s+=>\s*(?P<path>/\S*)?" + _ADDRESS + r"\s*$"
)
# name => not found
_NOT_FOUND_RX = re.compile(r"^\s*(?P<name>\S+)\s+=>\s*not found\s*$")
# /absolute/path (0xADDR)
_DIRECT_RX = re.compile(r"^\s*(?P<path>/\S+)" + _ADDRESS + r"\s*$")

_VIRTUAL_RX = re.compile("|".join(VIRTUAL_ENTRY_PATTERNS))


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_line(line: str) -> ParsedLine:
    """
    Parse a single listing line into an Edge or a Skip.

    Args:
        line: Raw line, with or without leading tab and trailing newline.

    Returns:
        ParsedLine: Edge for a bundle candidate, Skip otherwise.
    """
    text = line.rstrip("\n")

    m = _ARROW_RX.match(text)
    if m:
        name = m.group("name")
        path = m.group("path") or ""
        if _is_virtual(name) or _is_virtual(path):
            return Skip(line=text, reason=SkipReason.VIRTUAL, name=name)
        if not path:
            # Old loaders print 'linux-vdso.so.1 =>  (0x...)' with no path
            return Skip(line=text, reason=SkipReason.UNRECOGNIZED, name=name)
        return Edge(path=path, name=name, address=m.group("address") or "")

    m = _NOT_FOUND_RX.match(text)
    if m:
        return Skip(line=text, reason=SkipReason.UNRESOLVED, name=m.group("name"))

    m = _DIRECT_RX.match(text)
    if m:
        path = m.group("path")
        if _is_virtual(path):
            return Skip(line=text, reason=SkipReason.VIRTUAL, name=path)
        return Edge(path=path, address=m.group("address") or "")

    # Virtual objects listed without arrow, e.g. 'linux-vdso.so.1 (0x...)'
    stripped = text.strip()
    if stripped and _is_virtual(stripped.split()[0]):
        return Skip(line=text, reason=SkipReason.VIRTUAL, name=stripped.split()[0])

    return Skip(line=text, reason=SkipReason.UNRECOGNIZED)


def parse_output(lines: Iterable[str]) -> List[ParsedLine]:
    """Parse every line of a listing, preserving order."""
    return [parse_line(line) for line in lines]


def _is_virtual(token: str) -> bool:
    return bool(token) and bool(_VIRTUAL_RX.search(token))
