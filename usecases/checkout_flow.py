# usecases/checkout_flow.py - Build and submit an order from the cart
import logging
import sys
from pathlib import Path
from typing import Optional, Union

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from config import settings
from domain.errors import CartError, CheckoutError
from domain.models import (
    CatalogClient, GuardSkipped, OrderItem, OrderPlaced, OrderRequest
)
from usecases.cart_store import CartStore
from usecases.selection_context import SelectionContext

logger = logging.getLogger(__name__)

CheckoutResult = Union[OrderPlaced, GuardSkipped]

class CheckoutFlow:
    def __init__(self, client: CatalogClient, cart: CartStore, selection: SelectionContext):
        self.client = client
        self.cart = cart
        self.selection = selection
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """True while a submission is waiting for the backend"""
        return self._in_flight

    def build_order_request(self, email: str, address: str) -> OrderRequest:
        """Assemble an order from the cart and the active restaurant's delivery fee"""
        restaurant = self.selection.active_restaurant
        if restaurant is None:
            raise CartError("No active restaurant to order from")

        snapshot = self.cart.snapshot(restaurant.delivery_fee)
        items = []
        for line in snapshot.lines:
            if line.restaurant_id != restaurant.id:
                raise CartError(
                    f"Cart line {line.id} belongs to restaurant {line.restaurant_id}, "
                    f"active restaurant is {restaurant.id}"
                )
            items.append(OrderItem(
                item_id=line.id,
                restaurant_id=line.restaurant_id,
                name=line.name,
                price=line.price,
                qty=line.qty
            ))

        return OrderRequest(
            email=email,
            address=address,
            items=items,
            delivery_fee=restaurant.delivery_fee
        )

    async def checkout(self, email: Optional[str] = None, address: Optional[str] = None) -> CheckoutResult:
        """
        Submit the current cart as an order.

        Returns GuardSkipped without calling the backend when there is no
        active restaurant, the cart is empty or a previous submission is
        still outstanding. Raises CheckoutError when the submission fails.
        The cart and the selection are left as they are after success.
        """
        if self.selection.active_restaurant is None:
            return GuardSkipped("no active restaurant")
        if self.cart.is_empty:
            return GuardSkipped("cart is empty")
        if self._in_flight:
            return GuardSkipped("checkout already in progress")

        request = self.build_order_request(
            settings.DEFAULT_EMAIL if email is None else email,
            settings.DEFAULT_ADDRESS if address is None else address
        )

        self._in_flight = True
        try:
            logger.info(f"Submitting order: {len(request.items)} lines, expected total {request.expected_total:.2f}")
            confirmation = await self.client.submit_order(request)
        except CheckoutError as e:
            logger.error(f"Checkout failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Checkout failed: {e}")
            raise CheckoutError(f"Order submission failed: {e}") from e
        finally:
            self._in_flight = False

        if abs(confirmation.total - request.expected_total) > 0.01:
            logger.warning(
                f"Server total {confirmation.total:.2f} differs from expected {request.expected_total:.2f}"
            )
        logger.info(f"✅ Order placed, total {confirmation.total:.2f}")
        return OrderPlaced(total=confirmation.total, request=request)
