"""
Sanitizers -- turn untrusted input into a safe canonical value.

Unlike the validators these never fail: they always return a
best-effort value that passes the hard checks.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

from .validation import (
    FORBIDDEN_CHARS,
    GRAPHEME_RE,
    MAX_DECIMALS,
    MAX_NAME_LENGTH,
    parse_number,
)

_STRIP_TABLE = str.maketrans("", "", FORBIDDEN_CHARS)
_QUANTUM = Decimal(1).scaleb(-MAX_DECIMALS)


def sanitize_quantity(value: Any) -> Union[int, float]:
    """Parse and round a quantity to at most three decimals.

    Unparseable or negative input becomes ``0``. Rounding is half-up
    on the decimal value the input was written as, so ``1.0005`` gives
    ``1.001``. Whole results are returned as ``int``.
    """
    qty = parse_number(value)
    if math.isnan(qty) or qty < 0:
        return 0
    if qty.is_integer():
        return int(qty)
    if math.isinf(qty):
        return qty

    rounded = Decimal(repr(qty)).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return int(rounded)
    return float(rounded)


def sanitize_name(value: Any) -> str:
    """Trim, strip forbidden characters and cap the length of a name.

    The cap counts displayed characters (grapheme clusters), so a flag,
    an accented letter or a skin-toned emoji is one unit and is never
    cut in half.
    """
    if value is None:
        return ""
    name = str(value).strip().translate(_STRIP_TABLE)
    if len(name) > MAX_NAME_LENGTH:
        clusters = GRAPHEME_RE.findall(name)
        if len(clusters) > MAX_NAME_LENGTH:
            name = "".join(clusters[:MAX_NAME_LENGTH])
    return name.strip()
