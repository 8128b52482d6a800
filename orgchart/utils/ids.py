"""Identifier canonicalization. Every id comparison goes through here."""

import math

type RawID = str | int | float | None


def normalize_id(value: RawID) -> str:
    """Trim and case-fold an identifier.

    ``None``, NaN and blank strings map to ``''``. Integral floats (what pandas
    hands back for a numeric id column with gaps) lose their ``.0`` so that
    ``1001.0`` and ``"1001"`` match.
    """
    match value:
        case None:
            return ""
        case float() if math.isnan(value):
            return ""
        case float() if value.is_integer():
            return str(int(value))
        case _:
            return str(value).strip().casefold()


def is_blank(value: RawID) -> bool:
    return normalize_id(value) == ""
