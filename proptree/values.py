# proptree/values.py
"""
proptree.values
---------------

Type inference for property values.

Both readers receive values as trimmed strings. ``try_parse`` is the
hierarchical reader's policy (comma lists, exact booleans, arbitrary
precision numbers); ``convert_value`` is the flat reader's, which also
accepts case-insensitive booleans and inline JSON objects/arrays.
"""

import json
import re
from decimal import Decimal
from typing import Any

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_integer(raw: str):
    """Return the int value of a plain integer literal, otherwise None.

    Only an optional sign followed by ASCII digits is accepted; ``int()``'s
    extras (underscores, surrounding whitespace) are not.
    """
    if _INTEGER_RE.fullmatch(raw):
        # Through Decimal: int(str) refuses literals over sys.get_int_max_str_digits().
        return int(Decimal(raw))
    return None


def parse_decimal(raw: str):
    """Return ``Decimal(raw)`` for a decimal literal, otherwise None.

    Accepts a sign, a fractional part and an exponent (``-1.5e3``, ``.5``, ``2.``)
    but not ``NaN``/``Infinity``.
    """
    if _DECIMAL_RE.fullmatch(raw):
        return Decimal(raw)
    return None


def split_list(raw: str) -> list:
    """Split on every comma, dropping trailing empty pieces.

    ``"1,,2"`` keeps its inner empty piece; ``"1,2,"`` gives ``["1", "2"]``.
    """
    pieces = raw.split(",")
    while pieces and pieces[-1] == "":
        pieces.pop()
    return pieces


def try_parse(raw: str) -> Any:
    """
    Resolve a trimmed raw value to a typed value. First match wins:

    1. contains a comma -> list, each piece inferred with this same policy
       (pieces are not trimmed, so ``"1, 2"`` gives ``[1, " 2"]``);
    2. exactly ``true`` / ``false`` -> bool;
    3. integer literal -> int;
    4. decimal literal -> Decimal;
    5. anything else -> the string unchanged.
    """
    if "," in raw:
        return [try_parse(piece) for piece in split_list(raw)]
    if raw == "true":
        return True
    if raw == "false":
        return False

    number = parse_integer(raw)
    if number is not None:
        return number
    number = parse_decimal(raw)
    if number is not None:
        return number
    return raw


def convert_value(raw: str) -> Any:
    """
    Convert a flat-mode value: bool (any case), int, Decimal, inline JSON
    object/array, or the original string.
    """
    lower_val = raw.lower()
    if lower_val == "true":
        return True
    if lower_val == "false":
        return False

    number = parse_integer(raw)
    if number is not None:
        return number
    number = parse_decimal(raw)
    if number is not None:
        return number

    if (raw.startswith("{") and raw.endswith("}")) or (raw.startswith("[") and raw.endswith("]")):
        try:
            return json.loads(raw, parse_float=Decimal, parse_int=parse_integer)
        except ValueError:
            # Looks like JSON but isn't; keep the text.
            pass
    return raw
