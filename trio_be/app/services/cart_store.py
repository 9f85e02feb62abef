"""Shopper cart kept as a single JSON array under one storage key.

Entries are unique per (product id, selected size). Quantities are always at
least 1: setting a quantity of 0 or less removes the entry. Each mutation
writes the whole list back and then notifies subscribed listeners with the
new entry list. Reads and writes are plain read-modify-write; two stores on
the same storage do not coordinate and the last write wins.
"""
import json
import logging
from typing import Callable, List, Optional

from pydantic import ValidationError

from app.schemas.cart import CartEntry
from app.schemas.product import ProductOut
from app.services.cart_storage import KeyValueStorage

logger = logging.getLogger(__name__)

CART_KEY = "trio_cart"

CartListener = Callable[[List[CartEntry]], None]


class CartError(ValueError):
    """Invalid cart operation (bad quantity)."""


def _size_key(size: Optional[str]) -> str:
    return (size or "").strip()


class CartStore:
    def __init__(self, storage: KeyValueStorage, key: str = CART_KEY):
        self.storage = storage
        self.key = key
        self._listeners: List[CartListener] = []

    # Observers

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, entries: List[CartEntry]) -> None:
        for listener in list(self._listeners):
            try:
                listener(list(entries))
            except Exception:
                logger.exception("Cart listener %r failed", listener)

    # Persistence

    def items(self) -> List[CartEntry]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored cart is not valid JSON; treating it as empty")
            return []
        if not isinstance(data, list):
            logger.warning("Stored cart is not a list; treating it as empty")
            return []
        entries: List[CartEntry] = []
        for item in data:
            try:
                entries.append(CartEntry.model_validate(item))
            except ValidationError:
                logger.warning("Dropping malformed cart entry: %.80r", item)
        return entries

    def _save(self, entries: List[CartEntry]) -> None:
        payload = [e.model_dump(mode="json", exclude_none=True) for e in entries]
        self.storage.set(self.key, json.dumps(payload))
        self._notify(entries)

    @staticmethod
    def _find(entries: List[CartEntry], product_id: int, size: str) -> int:
        for index, entry in enumerate(entries):
            if entry.product.id == product_id and entry.size_key == size:
                return index
        return -1

    # Mutations

    def add(self, product: ProductOut, quantity: int = 1, size: str = "") -> CartEntry:
        if quantity < 1:
            raise CartError("Quantity must be at least 1")
        size = _size_key(size)
        entries = self.items()
        index = self._find(entries, product.id, size)
        if index > -1:
            entry = entries[index]
            entry.quantity += quantity
        else:
            entry = CartEntry(product=product, quantity=quantity, selectedSize=size or None)
            entries.append(entry)
        self._save(entries)
        return entry

    def set_quantity(self, product_id: int, quantity: int, size: str = "") -> bool:
        """Overwrite an entry's quantity; 0 or less removes it.

        Returns False (and writes nothing) when no entry matches.
        """
        size = _size_key(size)
        entries = self.items()
        index = self._find(entries, product_id, size)
        if index == -1:
            return False
        if quantity <= 0:
            del entries[index]
        else:
            entries[index].quantity = quantity
        self._save(entries)
        return True

    def remove(self, product_id: int, size: str = "") -> None:
        size = _size_key(size)
        entries = [
            e for e in self.items()
            if not (e.product.id == product_id and e.size_key == size)
        ]
        self._save(entries)

    def clear(self) -> None:
        self.storage.remove(self.key)
        self._notify([])

    # Aggregates

    def total(self) -> float:
        return sum(e.line_total for e in self.items())

    def count(self) -> int:
        return sum(e.quantity for e in self.items())
