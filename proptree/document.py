# proptree/document.py
"""
proptree.document
-----------------

Helpers for documents: the nested ``dict`` trees produced by the readers.

A document maps string keys to booleans, ints, ``Decimal`` values, strings,
lists of those, or nested documents. Plain ``dict`` is used throughout so
insertion order is the order in which keys were first seen.
"""

import copy
import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

import simplejson

log = logging.getLogger(__name__)

# int -> str conversion is capped at 4300 digits by default (sys.get_int_max_str_digits).
_INT_STR_SAFE_BITS = 14000


def merge_in(target: dict, updates: Mapping, _source: str = "unknown",
             _provenance=None, _prefix: str = "") -> dict:
    """
    Recursively merge `updates` into `target` in place and return `target`.

    - If a key exists in both and BOTH values are dicts, they are merged recursively.
    - Otherwise the value from `updates` replaces the one in `target`
      (last write wins for scalars, lists, and type conflicts).

    Values from `updates` are stored by reference, so callers that keep using
    `updates` afterwards should pass a copy (see `deep_merge`).

    Args:
        target: The document to modify.
        updates: The document whose entries take precedence.
        _source: Label recorded in `_provenance` for every leaf written.
        _provenance: Optional ProvenanceStore; leaves are recorded under their
                     dotted key path. Dict-into-dict merges record only leaves.
        _prefix: Dotted path of `target` inside the root document.
    """
    for key, value in updates.items():
        path = f"{_prefix}.{key}" if _prefix else key
        current = target.get(key)

        if isinstance(current, dict) and isinstance(value, dict):
            merge_in(current, value, _source, _provenance, path)
            continue

        type_conflict = key in target and isinstance(current, dict) != isinstance(value, dict)
        if type_conflict:
            log.debug(f"merge_in: replacing {type(current).__name__} at '{path}' "
                      f"with {type(value).__name__} from {_source}")
        target[key] = value
        if _provenance is not None:
            # Entries for a replaced subtree or scalar no longer describe the document.
            if isinstance(current, dict):
                _provenance.discard_under(path)
            elif type_conflict:
                _provenance.discard(path)
            _record_leaves(_provenance, path, value, _source)

    return target


def deep_merge(base: Mapping, updates: Mapping, _source: str = "unknown", _provenance=None) -> dict:
    """
    Return a new document with `updates` deep-merged over `base`.

    Neither argument is modified. Merge rules are those of `merge_in`.
    """
    merged = copy.deepcopy(dict(base))
    return merge_in(merged, copy.deepcopy(dict(updates)), _source, _provenance)


def _record_leaves(provenance, path: str, value: Any, source: str) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            _record_leaves(provenance, f"{path}.{key}", child, source)
    else:
        provenance.record(path, value, source)


def get_by_dot(doc: Mapping, key: str) -> Any:
    """
    Retrieve a nested value from a document using a dot-notated key.

    Raises:
        KeyError: If any part of the key path does not exist.
        TypeError: If the path runs through a non-mapping value
                   (e.g., "a.b" when "a" is an integer).
    """
    d = doc
    parts = key.split('.')
    for i, p in enumerate(parts):
        if not isinstance(d, Mapping):
            current_path = '.'.join(parts[:i])
            raise TypeError(f"Cannot access key '{p}' on non-mapping item at path "
                            f"'{current_path}' (item type: {type(d).__name__})")
        if p not in d:
            found_path = '.'.join(parts[:i])
            raise KeyError(f"Key path '{key}' not found (missing part: '{p}' at path '{found_path}')")
        d = d[p]
    return d


def flatten(doc: Mapping, prefix: str = "") -> Dict[str, Any]:
    """Flatten a nested document into { 'a.b.c': value, … }."""
    items = {}
    for k, v in doc.items():
        key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, Mapping) and v:
            items.update(flatten(v, key))
        else:
            items[key] = v
    return items


def to_serializable(value: Any) -> Any:
    """
    Convert a document (or any value inside one) into JSON/TOML-friendly types.

    Tuples become lists. Decimals are kept so their exact digits reach the
    output; ints too long for ``str()`` are turned into Decimals for the same
    reason. Everything else is kept.
    """
    if isinstance(value, Mapping):
        return {k: to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_serializable(v) for v in value]
    if isinstance(value, int) and not isinstance(value, bool) and value.bit_length() > _INT_STR_SAFE_BITS:
        return Decimal(value)
    return value


def dumps(doc: Any, indent: Optional[int] = 2) -> str:
    """Return a JSON representation of a document, numbers written exactly."""
    return simplejson.dumps(to_serializable(doc), indent=indent, use_decimal=True)
