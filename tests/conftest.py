# tests/conftest.py - Shared fixtures: an in-memory catalog backend
import asyncio
from typing import Dict, List, Optional

import pytest

from domain.errors import FetchError
from domain.models import (
    CatalogClient, MenuItem, OrderConfirmation, OrderRequest, Restaurant
)

class FakeCatalog(CatalogClient):
    """In-memory collaborator recording every call, with failure injection and gates"""

    def __init__(self, restaurants: List[Restaurant], menus: Dict[str, List[MenuItem]]):
        self.restaurants = list(restaurants)
        self.menus = dict(menus)
        self.calls = []
        self.submitted: List[OrderRequest] = []
        self.failing_menus = set()
        self.fail_list = False
        self.order_error: Optional[Exception] = None
        self.order_total: Optional[float] = None  # None: confirm the expected total
        self.menu_gates: Dict[str, asyncio.Event] = {}
        self.order_gate: Optional[asyncio.Event] = None
        self.closed = False

    async def seed(self, reset: bool = False) -> None:
        self.calls.append(("seed", reset))

    async def list_restaurants(self) -> List[Restaurant]:
        self.calls.append(("list_restaurants",))
        if self.fail_list:
            raise FetchError("catalog down")
        return list(self.restaurants)

    async def get_menu(self, restaurant_id: str) -> List[MenuItem]:
        self.calls.append(("get_menu", restaurant_id))
        gate = self.menu_gates.get(restaurant_id)
        if gate is not None:
            await gate.wait()
        if restaurant_id in self.failing_menus:
            raise FetchError(f"menu of {restaurant_id} unavailable")
        if restaurant_id not in self.menus:
            raise FetchError(f"Restaurant {restaurant_id} not found")
        return list(self.menus[restaurant_id])

    async def submit_order(self, request: OrderRequest) -> OrderConfirmation:
        self.calls.append(("submit_order",))
        self.submitted.append(request)
        if self.order_gate is not None:
            await self.order_gate.wait()
        if self.order_error is not None:
            raise self.order_error
        total = self.order_total if self.order_total is not None else request.expected_total
        return OrderConfirmation(total=total)

    async def close(self) -> None:
        self.closed = True

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


R0 = Restaurant(id="r0", name="Noodle Bar", cuisine="Thai", rating=4.2, delivery_fee=2.50)
R1 = Restaurant(id="r1", name="Pizza Place", cuisine="Italian", rating=4.7, delivery_fee=3.00)
R2 = Restaurant(id="r2", name="Taco Stand", cuisine="Mexican", rating=3.9, delivery_fee=0.0)

ITEM_A = MenuItem(id="a", restaurant_id="r1", name="Margherita", price=10.00, description="Tomato, mozzarella")
ITEM_B = MenuItem(id="b", restaurant_id="r1", name="Tiramisu", price=4.50)
ITEM_C = MenuItem(id="c", restaurant_id="r0", name="Pad Thai", price=7.25)
ITEM_D = MenuItem(id="d", restaurant_id="r2", name="Al Pastor", price=3.50)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        restaurants=[R0, R1, R2],
        menus={"r0": [ITEM_C], "r1": [ITEM_A, ITEM_B], "r2": [ITEM_D]},
    )

