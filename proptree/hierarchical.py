# proptree/hierarchical.py
"""
proptree.hierarchical
---------------------

Hierarchical properties reader: dotted keys become nested documents.

Every significant line ``a.b.c=value`` is turned into a single-branch
fragment ``{"a": {"b": {"c": value}}}`` and the fragments are deep-merged in
input order, so siblings sharing a prefix end up side by side and a repeated
leaf keeps the last value seen.

Example::

    >>> parse_lines(["db.host=localhost", "db.port=5432", "# comment"])
    {'db': {'host': 'localhost', 'port': 5432}}
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Tuple

from .document import merge_in
from .exceptions import MalformedEntryError
from .provenance import line_source
from .utils import iter_lines
from .values import try_parse

log = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "!")


@dataclass(frozen=True)
class Entry:
    """One significant line split into a key path and its trimmed raw value."""

    path: Tuple[str, ...]
    value: str
    line_number: Optional[int] = None

    @property
    def key(self) -> str:
        return ".".join(self.path)


def is_ignorable(line: str) -> bool:
    """True for blank lines and ``#`` / ``!`` comments."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIXES)


def significant_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """Lazily yield ``(line_number, line)`` for every non-ignorable line, in order.

    Line numbers are 1-based and count the ignored lines too.
    """
    for number, line in enumerate(lines, 1):
        if not is_ignorable(line):
            yield number, line


def split_entry(line: str, line_number: Optional[int] = None) -> Entry:
    """
    Split a significant line on its first ``=``.

    Key and value are trimmed; the key is then split on every ``.``. Empty
    segments (``a..b``, ``.a``, ``a.``) are kept as ``""``.

    Raises:
        MalformedEntryError: If the line has no ``=``.
    """
    key, separator, value = line.partition("=")
    if not separator:
        raise MalformedEntryError(line, line_number)
    return Entry(tuple(key.strip().split(".")), value.strip(), line_number)


def resolve_value(entry: Entry, raw_data: bool = False) -> Any:
    return entry.value if raw_data else try_parse(entry.value)


def build_fragment(path: Tuple[str, ...], value: Any, raw_data: bool = False) -> dict:
    """
    Build the single-branch document for one entry.

    Typed mode nests through every segment: ``("a", "b", "c")`` gives
    ``{"a": {"b": {"c": value}}}``. Raw mode attaches the value at the first
    segment and drops the others, so ``a.b.c=5`` becomes ``{"a": "5"}``.
    """
    if not path:
        return {}
    if len(path) == 1 or raw_data:
        # NOTE: in raw mode segments after the first are discarded, unlike typed mode.
        return {path[0]: value}
    return {path[0]: _nest(path[1:], value)}


def _nest(path: Tuple[str, ...], value: Any) -> dict:
    if not path:
        return {}
    if len(path) == 1:
        return {path[0]: value}
    return {path[0]: _nest(path[1:], value)}


def parse_lines(lines: Iterable[str], raw_data: bool = False, provenance=None) -> dict:
    """
    Fold decoded lines into one document.

    Args:
        lines: Text lines without terminators.
        raw_data: Keep values as trimmed strings and nest one level only.
        provenance: Optional ProvenanceStore; each leaf is recorded with
                    source ``"line:<n>"``.

    Returns:
        The merged document; ``{}`` when there is no significant line.

    Raises:
        MalformedEntryError: On the first significant line without ``=``.
            Nothing is returned in that case, though ``provenance`` keeps
            what was recorded for earlier lines.
    """
    document = {}
    count = 0
    for number, line in significant_lines(lines):
        entry = split_entry(line, number)
        fragment = build_fragment(entry.path, resolve_value(entry, raw_data), raw_data)
        log.debug(f"parse_lines: line {number} sets '{entry.key}'")
        merge_in(document, fragment, line_source(number), provenance)
        count += 1

    log.debug(f"parse_lines: merged {count} entries into {len(document)} top-level keys (raw_data={raw_data})")
    return document


def parse(raw_data: bool, data, encoding: Optional[str] = None, provenance=None) -> dict:
    """
    Parse a properties buffer into a nested document.

    Args:
        raw_data: False for typed values and full nesting, True for raw mode.
        data: bytes-like, binary file object, or ``str``.
        encoding: Text encoding of ``data``; platform default when None.
        provenance: Optional ProvenanceStore, see `parse_lines`.

    Raises:
        MalformedEntryError: If a significant line has no ``=``.
        UnicodeDecodeError: If ``data`` cannot be decoded.
    """
    return parse_lines(iter_lines(data, encoding), raw_data, provenance)
