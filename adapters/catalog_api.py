# adapters/catalog_api.py - HTTP implementation of the catalog/order backend
import asyncio
import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from config import settings
from domain.errors import CheckoutError, FetchError
from domain.models import (
    CatalogClient, MenuItem, OrderConfirmation, OrderRequest, Restaurant
)

logger = logging.getLogger(__name__)

# Pydantic schemas (wire format)
class RestaurantSchema(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)  # backends may use integer ids

    id: str = Field(..., description="Restaurant ID")
    name: str
    cuisine: str = ""
    rating: Optional[float] = Field(0.0, description="Average rating, typically 0-5")
    delivery_fee: Optional[float] = Field(0.0, ge=0, description="Delivery fee")
    image: str = ""

    @field_validator("rating", mode="before")
    @classmethod
    def rating_or_zero(cls, value):
        # Missing or non-numeric ratings are shown as 0 instead of hiding the restaurant
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("delivery_fee", mode="before")
    @classmethod
    def fee_or_zero(cls, value):
        return 0.0 if value is None else value

    def to_domain(self) -> Restaurant:
        return Restaurant(
            id=self.id,
            name=self.name,
            cuisine=self.cuisine,
            rating=self.rating,
            delivery_fee=self.delivery_fee,
            image=self.image
        )

class MenuItemSchema(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., description="Menu item ID")
    restaurant_id: str
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    image: str = ""

    def to_domain(self) -> MenuItem:
        return MenuItem(
            id=self.id,
            restaurant_id=self.restaurant_id,
            name=self.name,
            price=self.price,
            description=self.description,
            image=self.image
        )

class OrderItemSchema(BaseModel):
    item_id: str
    restaurant_id: str
    name: str
    price: float
    qty: int = Field(..., ge=1)

class OrderRequestSchema(BaseModel):
    email: str
    address: str
    items: List[OrderItemSchema] = Field(..., min_length=1)
    delivery_fee: float = Field(..., ge=0)

    @classmethod
    def from_domain(cls, request: OrderRequest) -> "OrderRequestSchema":
        return cls(
            email=request.email,
            address=request.address,
            items=[
                OrderItemSchema(
                    item_id=item.item_id,
                    restaurant_id=item.restaurant_id,
                    name=item.name,
                    price=item.price,
                    qty=item.qty
                )
                for item in request.items
            ],
            delivery_fee=request.delivery_fee
        )

class OrderResponseSchema(BaseModel):
    total: float = Field(..., strict=True, description="Server-confirmed order total")

class HttpCatalogClient(CatalogClient):
    """Catalog client talking JSON over HTTP; blocking calls run in a thread pool"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 max_workers: Optional[int] = None):
        self.base_url = (base_url or settings.BACKEND_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self.executor = ThreadPoolExecutor(max_workers=max_workers or settings.HTTP_MAX_WORKERS)

    @property
    def session(self) -> requests.Session:
        """Session of the calling worker thread (requests.Session is not thread-safe)"""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, func, *args)

    def _get_json_sync(self, path: str) -> Any:
        """Synchronous GET returning decoded JSON"""
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"GET {path} failed: {e}")
            raise FetchError(f"Catalog unreachable: {e}") from e

        if response.status_code == 404:
            raise FetchError(f"Not found: {path}")
        if not response.ok:
            logger.error(f"GET {path} returned HTTP {response.status_code}: {response.text[:200]}")
            raise FetchError(f"Catalog returned HTTP {response.status_code} for {path}")

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {path}") from e

    def _seed_sync(self, reset: bool):
        try:
            response = self.session.post(f"{self.base_url}/seed", json={"reset": reset}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Seeding catalog failed: {e}")
            raise FetchError(f"Catalog unreachable: {e}") from e
        if not response.ok:
            raise FetchError(f"Seeding catalog returned HTTP {response.status_code}")

    def _submit_order_sync(self, payload: dict) -> Any:
        try:
            response = self.session.post(f"{self.base_url}/orders", json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"POST /orders failed: {e}")
            raise CheckoutError(f"Order service unreachable: {e}") from e

        if not response.ok:
            logger.error(f"POST /orders returned HTTP {response.status_code}: {response.text[:200]}")
            raise CheckoutError(f"Order service returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise CheckoutError("Order service returned invalid JSON") from e

    async def seed(self, reset: bool = False) -> None:
        await self._run(self._seed_sync, reset)

    async def list_restaurants(self) -> List[Restaurant]:
        data = await self._run(self._get_json_sync, "/restaurants")
        if not isinstance(data, list):
            raise FetchError("Restaurant list is not a JSON array")
        try:
            return [RestaurantSchema.model_validate(row).to_domain() for row in data]
        except ValidationError as e:
            raise FetchError(f"Malformed restaurant data: {e}") from e

    async def get_menu(self, restaurant_id: str) -> List[MenuItem]:
        path = f"/restaurants/{requests.utils.quote(restaurant_id, safe='')}/menu"
        data = await self._run(self._get_json_sync, path)
        if not isinstance(data, list):
            raise FetchError(f"Menu of restaurant {restaurant_id} is not a JSON array")
        try:
            return [MenuItemSchema.model_validate(row).to_domain() for row in data]
        except ValidationError as e:
            raise FetchError(f"Malformed menu data for restaurant {restaurant_id}: {e}") from e

    async def submit_order(self, request: OrderRequest) -> OrderConfirmation:
        try:
            payload = OrderRequestSchema.from_domain(request).model_dump()
        except ValidationError as e:
            raise CheckoutError(f"Invalid order request: {e}") from e

        data = await self._run(self._submit_order_sync, payload)
        try:
            confirmation = OrderResponseSchema.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed order confirmation: {data!r}")
            raise CheckoutError("Order confirmation is missing a numeric total") from e
        return OrderConfirmation(total=confirmation.total)

    async def close(self) -> None:
        self.executor.shutdown(wait=False)
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
