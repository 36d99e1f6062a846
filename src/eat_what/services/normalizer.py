"""Turn a free-form model reply into a consistent nutrition result."""

import json
import logging
import math
import sys
from collections.abc import Iterator
from decimal import ROUND_HALF_UP, Decimal, localcontext

from eat_what.domain.errors import UnparseableResponse
from eat_what.domain.nutrition import (
    PLACEHOLDER_NAME,
    FoodItem,
    NormalizedResult,
    NutritionTotals,
)

_logger = logging.getLogger(__name__)

_KCAL_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}

_MAX_FLOAT = sys.float_info.max
# Digits needed to quantize any finite float to one decimal place.
_ROUNDING_PRECISION = 400


def normalize_reply(reply: str) -> NormalizedResult:
    """Parse a model reply and rebuild items, totals and notes from it."""
    payload = parse_reply(reply)
    return normalize_payload(payload)


def normalize_payload(payload: dict[str, object]) -> NormalizedResult:
    """Build a result from an already parsed JSON object.

    Model-supplied totals are ignored and recomputed from the items.
    """
    raw_items = payload.get("items")
    if not isinstance(raw_items, list):
        raw_items = []
    items = [normalize_item(raw) for raw in raw_items]
    notes = payload.get("notes")
    return NormalizedResult(
        items=items,
        totals=compute_totals(items),
        notes=notes if isinstance(notes, str) else "",
    )


def normalize_item(raw: object) -> FoodItem:
    """Coerce one raw item, defaulting whatever is missing or malformed."""
    fields = raw if isinstance(raw, dict) else {}
    protein = _to_macro(fields.get("protein"))
    carbs = _to_macro(fields.get("carbs"))
    fat = _to_macro(fields.get("fat"))
    kcal = _to_number(fields.get("kcal"))
    if kcal is None:
        kcal_value = estimate_kcal(protein=protein, carbs=carbs, fat=fat)
    else:
        kcal_value = max(0, _round_int(kcal))
    name = fields.get("name")
    return FoodItem(
        name=str(name) if name else PLACEHOLDER_NAME,
        protein=_round_tenth(protein),
        carbs=_round_tenth(carbs),
        fat=_round_tenth(fat),
        kcal=kcal_value,
    )


def estimate_kcal(*, protein: float, carbs: float, fat: float) -> int:
    """Estimate calories with the 4/4/9 Atwater factors."""
    energy = (
        protein * _KCAL_PER_GRAM["protein"]
        + carbs * _KCAL_PER_GRAM["carbs"]
        + fat * _KCAL_PER_GRAM["fat"]
    )
    return _round_int(energy)


def compute_totals(items: list[FoodItem]) -> NutritionTotals:
    """Sum items field by field, rounding only after summation."""
    protein = sum(item.protein for item in items)
    carbs = sum(item.carbs for item in items)
    fat = sum(item.fat for item in items)
    return NutritionTotals(
        kcal=sum(item.kcal for item in items),
        protein=_round_tenth(protein),
        carbs=_round_tenth(carbs),
        fat=_round_tenth(fat),
    )


def parse_reply(reply: str) -> dict[str, object]:
    """Return the JSON object contained in a model reply.

    The whole reply is tried first. Models that wrap JSON in prose or code
    fences are handled by scanning brace blocks left to right; the first one
    that decodes to an object wins.
    """
    parsed = _loads_object(reply)
    if parsed is not None:
        return parsed
    for candidate in _brace_blocks(reply):
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed
    _logger.error("Model reply has no JSON object: %r", reply)
    raise UnparseableResponse(reply)


def _loads_object(text: str) -> dict[str, object] | None:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _brace_blocks(text: str) -> Iterator[str]:
    """Yield the balanced block opening at each ``{``, in order."""
    start = text.find("{")
    while start >= 0:
        block = _balanced_block(text, start)
        if block is not None:
            yield block
        start = text.find("{", start + 1)


def _balanced_block(text: str, start: int) -> str | None:
    """Return the block at ``start`` whose braces balance outside strings."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _to_number(value: object) -> float | None:
    """Return a finite float, or None for anything non-numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_macro(value: object) -> float:
    number = _to_number(value)
    if number is None:
        return 0.0
    return max(0.0, number)


def _clamp(value: float) -> float:
    return max(-_MAX_FLOAT, min(value, _MAX_FLOAT))


def _round_tenth(value: float) -> float:
    return float(_quantize(value, Decimal("0.1")))


def _round_int(value: float) -> int:
    return int(_quantize(value, Decimal("1")))


def _quantize(value: float, step: Decimal) -> Decimal:
    """Round half-up; values past the float range are clamped first."""
    with localcontext(prec=_ROUNDING_PRECISION):
        return Decimal(repr(_clamp(value))).quantize(step, ROUND_HALF_UP)
