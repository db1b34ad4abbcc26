# main.py - Console entry point: browse the catalog and optionally place an order
import asyncio
import logging
import sys
from typing import List

from config import settings
from domain.errors import OrderingError
from domain.models import GuardSkipped
from services.ordering_session import init_ordering_session

def print_cart(session):
    snapshot = session.snapshot()
    print("🛒 Your order")
    for line in snapshot.lines:
        print(f"   {line.qty} x {line.name:<30} ${line.line_total:.2f}")
    print(f"   Subtotal ${snapshot.subtotal:.2f}")
    print(f"   Delivery ${snapshot.delivery_fee:.2f}")
    print(f"   Total    ${snapshot.total:.2f}")

async def run(argv: List[str]) -> int:
    """
    Usage: python main.py [restaurant_id [item_id ...]]

    Without arguments, lists the restaurants. With a restaurant id, shows its
    menu. With item ids as well, adds one unit per occurrence and checks out.
    """
    session = init_ordering_session()
    try:
        restaurants = await session.start()
        if not argv:
            print("🍽️  Popular restaurants")
            for r in restaurants:
                print(f"   [{r.id}] {r.name} - {r.cuisine} • ⭐ {r.rating:.1f} • Delivery ${r.delivery_fee:.2f}")
            return 0

        restaurant = await session.open_restaurant(argv[0])
        print(f"📋 {restaurant.name} ({restaurant.cuisine})")
        for item in session.selection.menu:
            print(f"   [{item.id}] {item.name:<30} ${item.price:.2f}  {item.description}")

        if len(argv) == 1:
            return 0

        for item_id in argv[1:]:
            session.add_item(item_id)
        print_cart(session)

        result = await session.checkout()
        if isinstance(result, GuardSkipped):
            print(f"⚠️  Nothing to check out: {result.reason}")
            return 1
        print(f"✅ Order placed! Total ${result.total:.2f}")
        return 0

    except OrderingError as e:
        print(f"❌ {e}")
        return 1
    finally:
        await session.close()

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    sys.exit(asyncio.run(run(sys.argv[1:])))
