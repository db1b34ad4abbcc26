# domain/models.py - Core business entities
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple
from abc import ABC, abstractmethod

@dataclass(frozen=True)
class Restaurant:
    id: str
    name: str
    cuisine: str
    rating: float  # typically 0-5
    delivery_fee: float
    image: str = ""

    def __post_init__(self):
        if self.delivery_fee < 0:
            raise ValueError(f"Restaurant {self.id} delivery fee must be non-negative, got {self.delivery_fee}")

@dataclass(frozen=True)
class MenuItem:
    id: str
    restaurant_id: str
    name: str
    price: float
    description: str = ""
    image: str = ""

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Menu item {self.id} price must be non-negative, got {self.price}")

@dataclass
class CartLine:
    id: str  # same as the source MenuItem id
    name: str
    price: float  # unit price captured when the item was first added
    qty: int
    restaurant_id: str

    @property
    def line_total(self) -> float:
        return self.price * self.qty

@dataclass(frozen=True)
class CartSnapshot:
    lines: Tuple[CartLine, ...]
    subtotal: float
    delivery_fee: float
    total: float
    item_count: int

    @property
    def is_empty(self) -> bool:
        return not self.lines

@dataclass(frozen=True)
class OrderItem:
    item_id: str
    restaurant_id: str
    name: str
    price: float
    qty: int

@dataclass(frozen=True)
class OrderRequest:
    email: str
    address: str
    items: List[OrderItem]
    delivery_fee: float

    @property
    def expected_total(self) -> float:
        """Total the client expects the backend to confirm"""
        return sum(item.price * item.qty for item in self.items) + self.delivery_fee

@dataclass(frozen=True)
class OrderConfirmation:
    total: float

# Checkout outcomes
@dataclass(frozen=True)
class OrderPlaced:
    total: float
    request: OrderRequest

@dataclass(frozen=True)
class GuardSkipped:
    reason: str

class ViewState(Enum):
    BROWSING = "browsing"
    VIEWING = "viewing"

# Collaborator interface (catalog + order backend)
class CatalogClient(ABC):
    @abstractmethod
    async def list_restaurants(self) -> List[Restaurant]:
        """List every restaurant in the catalog"""
        pass

    @abstractmethod
    async def get_menu(self, restaurant_id: str) -> List[MenuItem]:
        """Get the menu of one restaurant; FetchError when it does not exist"""
        pass

    @abstractmethod
    async def submit_order(self, request: OrderRequest) -> OrderConfirmation:
        """Submit an order and return the server-confirmed total"""
        pass

    async def seed(self, reset: bool = False) -> None:
        """Ask the backend to make sure its catalog is populated"""
        return None

    async def close(self) -> None:
        """Release transport resources"""
        return None
