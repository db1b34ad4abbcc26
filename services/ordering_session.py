# services/ordering_session.py - Owned ordering state shared with the view layer
import logging
from typing import List, Optional

from config import settings
from domain.errors import CartError
from domain.models import CartLine, CartSnapshot, CatalogClient, Restaurant
from usecases.cart_store import CartStore
from usecases.checkout_flow import CheckoutFlow, CheckoutResult
from usecases.selection_context import SelectionContext

logger = logging.getLogger(__name__)

class OrderingSession:
    """One customer's cart, selection and checkout over a single catalog client"""

    def __init__(self, client: CatalogClient):
        self.client = client
        self.cart = CartStore()
        self.selection = SelectionContext(client, self.cart)
        self.checkout_flow = CheckoutFlow(client, self.cart, self.selection)

    async def start(self, seed: Optional[bool] = None) -> List[Restaurant]:
        """Seed the backend if configured, then load the restaurant list"""
        if settings.SEED_ON_START if seed is None else seed:
            await self.client.seed(reset=False)
        return await self.selection.load_restaurants()

    async def open_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        return await self.selection.open_restaurant(restaurant_id)

    def close_restaurant(self):
        self.selection.close_restaurant()

    def add_item(self, item_id: str) -> CartLine:
        """Add a dish from the active menu"""
        if not self.selection.is_viewing:
            raise CartError("Open a restaurant before adding items")
        item = self.selection.find_menu_item(item_id)
        if item is None:
            raise CartError(f"Item {item_id} is not on the menu of {self.selection.active_restaurant.name}")
        return self.cart.add_item(item)

    def set_quantity(self, line_id: str, quantity: int):
        self.cart.set_quantity(line_id, quantity)

    def snapshot(self) -> CartSnapshot:
        return self.cart.snapshot(self.selection.delivery_fee)

    async def checkout(self, email: Optional[str] = None, address: Optional[str] = None) -> CheckoutResult:
        return await self.checkout_flow.checkout(email, address)

    async def close(self):
        await self.client.close()

# Global session instance
_ordering_session: Optional[OrderingSession] = None

def init_ordering_session(client: Optional[CatalogClient] = None) -> OrderingSession:
    """Initialize the global ordering session (HTTP client by default)"""
    global _ordering_session

    if client is None:
        from adapters.catalog_api import HttpCatalogClient
        client = HttpCatalogClient()

    _ordering_session = OrderingSession(client)
    logger.info(f"Ordering session initialized with {type(client).__name__}")
    return _ordering_session

def get_ordering_session() -> OrderingSession:
    """Get the global ordering session"""
    if _ordering_session is None:
        raise RuntimeError("Ordering session not initialized. Call init_ordering_session() first.")
    return _ordering_session
