# usecases/selection_context.py - Active restaurant and menu (browsing <-> viewing)
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from domain.errors import FetchError
from domain.models import CatalogClient, MenuItem, Restaurant, ViewState
from usecases.cart_store import CartStore

logger = logging.getLogger(__name__)

class SelectionContext:
    """
    Owns the restaurant list, the active restaurant and its menu.

    Opening a restaurant clears the cart, but only once the menu fetch has
    succeeded and only if no newer open/close was requested in the meantime.
    Every request takes a token from a monotonically increasing counter; a
    response whose token is no longer the latest is discarded.
    """

    def __init__(self, client: CatalogClient, cart: CartStore):
        self.client = client
        self.cart = cart
        self._restaurants: List[Restaurant] = []
        self._active: Optional[Restaurant] = None
        self._menu: List[MenuItem] = []
        self._latest_token = 0

    @property
    def state(self) -> ViewState:
        return ViewState.VIEWING if self._active is not None else ViewState.BROWSING

    @property
    def is_viewing(self) -> bool:
        return self._active is not None

    @property
    def active_restaurant(self) -> Optional[Restaurant]:
        return self._active

    @property
    def menu(self) -> Tuple[MenuItem, ...]:
        return tuple(self._menu)

    @property
    def restaurants(self) -> Tuple[Restaurant, ...]:
        return tuple(self._restaurants)

    @property
    def delivery_fee(self) -> float:
        """Delivery fee of the active restaurant, 0 while browsing"""
        return self._active.delivery_fee if self._active is not None else 0.0

    def find_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        for restaurant in self._restaurants:
            if restaurant.id == restaurant_id:
                return restaurant
        return None

    def find_menu_item(self, item_id: str) -> Optional[MenuItem]:
        for item in self._menu:
            if item.id == item_id:
                return item
        return None

    async def load_restaurants(self) -> List[Restaurant]:
        """Fetch the restaurant list; on failure the previous list is kept"""
        restaurants = list(await self.client.list_restaurants())
        self._restaurants = restaurants
        logger.info(f"Loaded {len(restaurants)} restaurants")
        return restaurants

    def _next_token(self) -> int:
        self._latest_token += 1
        return self._latest_token

    async def open_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        """
        Make a restaurant active and load its menu.

        Returns the opened restaurant, or None when a newer open/close made
        this request stale. Raises FetchError when the latest request fails;
        the previously active restaurant and the cart are left untouched.
        """
        token = self._next_token()
        logger.info(f"Opening restaurant {restaurant_id} (request {token})")

        try:
            restaurant = self.find_restaurant(restaurant_id)
            if restaurant is None:
                # The list may be out of date, refresh it once
                restaurants = list(await self.client.list_restaurants())
                restaurant = next((r for r in restaurants if r.id == restaurant_id), None)
                if token == self._latest_token:
                    self._restaurants = restaurants
                if restaurant is None:
                    raise FetchError(f"Restaurant {restaurant_id} not found")

            menu = list(await self.client.get_menu(restaurant_id))
        except FetchError as e:
            if token != self._latest_token:
                logger.info(f"Discarding failed stale request {token} for restaurant {restaurant_id}: {e}")
                return None
            logger.warning(f"Failed to open restaurant {restaurant_id}: {e}")
            raise

        if token != self._latest_token:
            logger.info(f"Discarding stale menu for restaurant {restaurant_id} (request {token})")
            return None

        # Commit: no await between here and the end of the method
        self._active = restaurant
        self._menu = menu
        self.cart.clear()
        self.cart.bind(restaurant.id)
        logger.info(f"Viewing {restaurant.name} ({len(menu)} menu items)")
        return restaurant

    def close_restaurant(self):
        """Return to the restaurant list. The cart is kept as it is."""
        self._next_token()  # a late menu response must not reopen a restaurant
        if self._active is not None:
            logger.info(f"Leaving restaurant {self._active.id}")
        self._active = None
        self._menu = []
