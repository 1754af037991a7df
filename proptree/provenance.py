# proptree/provenance.py
"""
proptree.provenance
-------------------

Which input line produced each value of a document.

The readers label every write with a source string. For properties input that
is ``"line:<n>"``, the 1-based physical line of the entry; ``deep_merge``
callers may pass any label (``"defaults"``, ``"file:/etc/app.properties"``).

The store only describes the document as it ends up:

    - a key overwritten by a later line keeps the earlier entries as history;
    - when a later line replaces a whole subtree (``a.b=1`` then ``a=2``) or
      turns a scalar into a subtree (``a=1`` then ``a.b=2``), the entries of
      the replaced keys are dropped, history included.

A store is filled by a single parse call and read afterwards; it is not meant
to be shared between concurrent parses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

LINE_SOURCE_PREFIX = "line:"

_LINE_SOURCE_RE = re.compile(r"line:(\d+)")


def line_source(line_number: int) -> str:
    """Source label for a value read from ``line_number``."""
    return f"{LINE_SOURCE_PREFIX}{line_number}"


def source_line(source: str) -> int | None:
    """Line number encoded in a ``"line:<n>"`` source, None for other sources."""
    match = _LINE_SOURCE_RE.fullmatch(source)
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class ProvenanceEntry:
    """Records the origin of a single document value.

    Attributes:
        value: The value that was set.
        source: Where it came from, e.g. ``"line:3"``.
        key: The full dot-notation key path (e.g., ``"server.http.port"``).
    """

    value: Any
    source: str
    key: str

    @property
    def line_number(self) -> int | None:
        return source_line(self.source)

    def __repr__(self) -> str:
        return f"{self.key} ← {self.source}"


@dataclass
class ProvenanceStore:
    """Current entry per dotted key, plus the entries later lines displaced."""

    _entries: dict[str, ProvenanceEntry] = field(default_factory=dict)
    _history: dict[str, list[ProvenanceEntry]] = field(default_factory=dict)

    def record(self, key: str, value: Any, source: str) -> None:
        """Record that ``key`` was set to ``value`` by ``source``."""
        previous = self._entries.get(key)
        if previous is not None:
            self._history.setdefault(key, []).append(previous)
        self._entries[key] = ProvenanceEntry(value=value, source=source, key=key)

    def discard(self, key: str) -> None:
        """Forget ``key`` and its history; unknown keys are ignored."""
        self._entries.pop(key, None)
        self._history.pop(key, None)

    def discard_under(self, key: str) -> None:
        """Forget every key nested below ``key`` (``key.*``), keeping ``key`` itself."""
        prefix = f"{key}."
        for nested in [k for k in self._entries if k.startswith(prefix)]:
            self.discard(nested)
        for nested in [k for k in self._history if k.startswith(prefix)]:
            self._history.pop(nested)

    def get(self, key: str) -> ProvenanceEntry | None:
        return self._entries.get(key)

    def get_history(self, key: str) -> list[ProvenanceEntry]:
        """All entries recorded for ``key``, oldest first, ending with the current one."""
        history = list(self._history.get(key, []))
        current = self._entries.get(key)
        if current:
            history.append(current)
        return history

    def all_entries(self) -> dict[str, ProvenanceEntry]:
        return dict(self._entries)

    def from_line(self, line_number: int) -> list[ProvenanceEntry]:
        """Current entries whose value came from ``line_number``; empty once later lines overwrote them."""
        return [e for e in self._entries.values() if e.line_number == line_number]

    def sources_summary(self) -> dict[str, int]:
        """Count current keys per source category (text before the first ``:``)."""
        counts: dict[str, int] = {}
        for entry in self._entries.values():
            base_source = entry.source.split(":")[0]
            counts[base_source] = counts.get(base_source, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._entries)
