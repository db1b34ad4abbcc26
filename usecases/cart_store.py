# usecases/cart_store.py - In-memory cart for the active restaurant
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional, Tuple

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from domain.errors import CartError
from domain.models import CartLine, CartSnapshot, MenuItem

logger = logging.getLogger(__name__)

class CartStore:
    """
    Owns the cart lines of the currently active restaurant.

    Lines are keyed by menu item id, so there is at most one line per item.
    Totals are never stored; `snapshot()` derives them on every call.
    """

    def __init__(self):
        self._lines: Dict[str, CartLine] = {}  # dicts keep insertion order
        self.restaurant_id: Optional[str] = None

    def bind(self, restaurant_id: Optional[str]):
        """Remember which restaurant the lines must belong to"""
        self.restaurant_id = restaurant_id

    def add_item(self, item: MenuItem) -> CartLine:
        """Add one unit of a menu item, merging with an existing line"""
        if self.restaurant_id is not None and item.restaurant_id != self.restaurant_id:
            raise CartError(
                f"Item {item.id} belongs to restaurant {item.restaurant_id}, "
                f"cart is for restaurant {self.restaurant_id}"
            )

        line = self._lines.get(item.id)
        if line is not None:
            line.qty += 1
            return line

        # Name and price are captured now and never re-read from the catalog
        line = CartLine(
            id=item.id,
            name=item.name,
            price=item.price,
            qty=1,
            restaurant_id=item.restaurant_id,
        )
        self._lines[item.id] = line
        return line

    def set_quantity(self, line_id: str, quantity: int):
        """Set a line's quantity, clamped to at least 1. Unknown ids are ignored."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise CartError(f"Quantity must be an integer, got {quantity!r}")

        line = self._lines.get(line_id)
        if line is None:
            logger.debug(f"Ignoring quantity update for unknown line {line_id}")
            return
        line.qty = max(1, quantity)

    def increment(self, line_id: str):
        line = self._lines.get(line_id)
        if line is not None:
            self.set_quantity(line_id, line.qty + 1)

    def decrement(self, line_id: str):
        line = self._lines.get(line_id)
        if line is not None:
            self.set_quantity(line_id, line.qty - 1)

    def clear(self):
        self._lines.clear()

    def get(self, line_id: str) -> Optional[CartLine]:
        line = self._lines.get(line_id)
        return replace(line) if line is not None else None

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(replace(line) for line in self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        """Total number of units across all lines"""
        return sum(line.qty for line in self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def snapshot(self, delivery_fee: float = 0.0) -> CartSnapshot:
        """Compute subtotal and total from the current lines without mutating them"""
        if delivery_fee < 0:
            raise ValueError(f"Delivery fee must be non-negative, got {delivery_fee}")

        lines = self.lines
        subtotal = sum((line.price * line.qty for line in lines), 0.0)
        return CartSnapshot(
            lines=lines,
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            total=subtotal + delivery_fee,
            item_count=sum(line.qty for line in lines),
        )
