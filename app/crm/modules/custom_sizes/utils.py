from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, NamedTuple

from app.crm.constants import MEASUREMENT_FIELDS
from app.crm.errors import InvalidArgument


class Triple(NamedTuple):
    chest: float
    waist: float
    hips: float


def _is_number(value: Any) -> bool:
    # bool is an int subclass; "true" is not a measurement.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def triple_errors(raw: Any) -> dict[str, str]:
    """Return {field: message} for every measurement that is missing, non-numeric or not > 0."""
    if not isinstance(raw, dict):
        return {"customSize": "customSize must be an object with chest, waist and hips."}
    errs: dict[str, str] = {}
    for field in MEASUREMENT_FIELDS:
        value = raw.get(field)
        if value is None:
            errs[field] = "is required"
            continue
        if not _is_number(value):
            errs[field] = "must be a number"
            continue
        try:
            value = float(value)
        except OverflowError:
            # JSON integers are unbounded; 1e400 written out does not fit a float.
            errs[field] = "is out of range"
            continue
        if not math.isfinite(value):
            errs[field] = "must be a number"
        elif value <= 0:
            errs[field] = "must be greater than 0"
    return errs


def parse_triple(raw: Any) -> Triple:
    """
    Validate a {chest, waist, hips} mapping.
    Raises InvalidArgument naming every failing field.
    """
    errs = triple_errors(raw)
    if errs:
        failed = ", ".join(sorted(errs))
        raise InvalidArgument(f"Invalid custom size: {failed}", fields=errs)
    return Triple(*(float(raw[f]) for f in MEASUREMENT_FIELDS))


def parse_timestamp(raw: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp (``Z`` suffix allowed) into naive UTC.
    Empty input returns None.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if not isinstance(raw, str):
        raise InvalidArgument("updatedAt must be an ISO-8601 string", fields={"updatedAt": "must be a string"})
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidArgument("updatedAt must be an ISO-8601 string", fields={"updatedAt": "is not a valid timestamp"}) from e
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts
