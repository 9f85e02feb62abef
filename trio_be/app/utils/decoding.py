"""Typed decoding of list/flag fields read back from storage.

Rows written by older clients hold JSON-encoded strings (``'["S", "M"]'``)
where newer rows hold native JSON lists, and in-stock flags may be stored as
``1``/``"0"``. Everything read from the database goes through these helpers
once, so callers always see a validated value or a well-defined empty one.
"""
import json
import logging
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from app.schemas.order import OrderItemSnapshot

logger = logging.getLogger(__name__)

_STRING_LIST = TypeAdapter(List[str])


def _load_json(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        return json.loads(raw)
    return raw


def decode_string_list(raw: Any, allow_bare: bool = False) -> List[str]:
    """Decode a list of strings (sizes, image URLs).

    ``allow_bare`` accepts a plain non-JSON string as a one-element list,
    which is how single image URLs were sometimes stored.
    """
    if raw is None or raw == "":
        return []
    try:
        value = _load_json(raw)
    except ValueError:
        if allow_bare and isinstance(raw, str):
            return [raw.strip()] if raw.strip() else []
        logger.warning("Discarding unparseable list value: %.80r", raw)
        return []
    if allow_bare and isinstance(value, str):
        value = [value]
    try:
        return [s for s in _STRING_LIST.validate_python(value) if s]
    except ValidationError:
        logger.warning("Discarding malformed list value: %.80r", raw)
        return []


def decode_flag(raw: Any, default: bool = False) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in ("1", "true", "yes"):
            return True
        if value in ("0", "false", "no", ""):
            return False
    return default


def decode_order_items(raw: Any) -> List[OrderItemSnapshot]:
    """Decode an order's item snapshot, dropping entries that do not validate."""
    if raw is None or raw == "":
        return []
    try:
        value = _load_json(raw)
    except ValueError:
        logger.warning("Discarding unparseable order items: %.80r", raw)
        return []
    if not isinstance(value, list):
        logger.warning("Order items are not a list: %.80r", raw)
        return []
    items: List[OrderItemSnapshot] = []
    for entry in value:
        try:
            items.append(OrderItemSnapshot.model_validate(entry))
        except ValidationError as e:
            logger.warning("Skipping malformed order item %.80r: %s", entry, e.errors())
    return items
