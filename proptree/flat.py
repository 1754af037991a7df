# proptree/flat.py
"""
proptree.flat
-------------

Flat properties reader: standard ``.properties`` syntax, keys kept as-is.

Supports ``=``, ``:`` or whitespace separators, backslash line
continuations, ``#``/``!`` comments and the usual escapes (``\\t``, ``\\n``,
``\\r``, ``\\f``, ``\\uXXXX``). Dotted keys are *not* nested:
``db.host=x`` gives ``{"db.host": "x"}``.
"""

import logging
import re
from typing import Iterable, Iterator, Optional, Tuple

from .exceptions import ParseError
from .provenance import line_source
from .utils import iter_lines
from .values import convert_value

log = logging.getLogger(__name__)

DEFAULT_ENCODING = "latin-1"

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")


def _continues(line: str) -> bool:
    """A line continues when it ends with an odd number of backslashes."""
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def logical_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """
    Join continued lines and drop comments and blank lines.

    Yields ``(first_line_number, logical_line)``; leading whitespace of every
    natural line is removed, the continuation backslash is dropped.
    """
    buffer = None
    start = 0
    for number, line in enumerate(lines, 1):
        stripped = line.lstrip(_WHITESPACE)
        if buffer is None:
            if not stripped or stripped[0] in "#!":
                continue
            buffer, start = "", number

        if _continues(stripped):
            buffer += stripped[:-1]
        else:
            yield start, buffer + stripped
            buffer = None

    if buffer is not None:
        # Continuation on the last line of the input.
        yield start, buffer


def unescape(text: str, line_number: Optional[int] = None) -> str:
    """
    Resolve backslash escapes in a key or value.

    Raises:
        ParseError: On a malformed ``\\uXXXX`` escape.
    """
    out = []
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        i += 1
        if i >= n:
            break
        c = text[i]
        if c == "u":
            digits = text[i + 1:i + 5]
            if not _HEX4_RE.fullmatch(digits):
                where = f" at line {line_number}" if line_number is not None else ""
                raise ParseError(f"Malformed \\uXXXX escape{where}: {text!r}")
            out.append(chr(int(digits, 16)))
            i += 5
            continue
        out.append(_ESCAPES.get(c, c))
        i += 1
    return "".join(out)


def split_key_value(line: str, line_number: Optional[int] = None) -> Tuple[str, str]:
    """
    Split a logical line into unescaped key and value.

    The key ends at the first unescaped ``=``, ``:`` or whitespace. A line with
    no separator is a key with an empty value. Trailing whitespace of the
    value is kept.
    """
    i, n = 0, len(line)
    while i < n:
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c in _SEPARATORS or c in _WHITESPACE:
            break
        i += 1
    i = min(i, n)
    key = line[:i]

    j = i
    while j < n and line[j] in _WHITESPACE:
        j += 1
    if j < n and line[j] in _SEPARATORS:
        j += 1
        while j < n and line[j] in _WHITESPACE:
            j += 1

    return unescape(key, line_number), unescape(line[j:], line_number)


def parse_lines(lines: Iterable[str], raw_data: bool = False, provenance=None) -> dict:
    """
    Read decoded lines into a flat document.

    Values are converted with `convert_value` unless ``raw_data`` is set.
    Duplicate keys keep the last value.
    """
    document = {}
    for number, line in logical_lines(lines):
        key, value = split_key_value(line, number)
        document[key] = value if raw_data else convert_value(value)
        if provenance is not None:
            provenance.record(key, document[key], line_source(number))

    log.debug(f"parse_lines: read {len(document)} flat properties (raw_data={raw_data})")
    return document


def parse(raw_data: bool, data, encoding: Optional[str] = DEFAULT_ENCODING, provenance=None) -> dict:
    """
    Parse a properties buffer without nesting keys.

    Args:
        raw_data: Keep every value as a string.
        data: bytes-like, binary file object, or ``str``.
        encoding: Defaults to ISO-8859-1, the classic properties encoding.
        provenance: Optional ProvenanceStore filled with ``"line:<n>"`` sources.
    """
    return parse_lines(iter_lines(data, encoding or DEFAULT_ENCODING), raw_data, provenance)
