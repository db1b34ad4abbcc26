# tests/test_selection_context.py - Opening/closing restaurants and cart reconciliation
import asyncio

import pytest

from conftest import ITEM_A, ITEM_C, R0, R1
from domain.errors import FetchError
from domain.models import ViewState
from usecases.cart_store import CartStore
from usecases.selection_context import SelectionContext


def make_context(catalog):
    cart = CartStore()
    return SelectionContext(catalog, cart), cart


def test_initial_state_is_browsing(catalog):
    selection, _ = make_context(catalog)

    assert selection.state == ViewState.BROWSING
    assert selection.active_restaurant is None
    assert selection.menu == ()
    assert selection.delivery_fee == 0.0


def test_load_restaurants(catalog):
    selection, _ = make_context(catalog)
    restaurants = asyncio.run(selection.load_restaurants())

    assert [r.id for r in restaurants] == ["r0", "r1", "r2"]
    assert selection.restaurants == tuple(restaurants)


def test_failed_load_keeps_previous_list(catalog):
    selection, _ = make_context(catalog)
    asyncio.run(selection.load_restaurants())
    catalog.fail_list = True

    with pytest.raises(FetchError):
        asyncio.run(selection.load_restaurants())
    assert len(selection.restaurants) == 3


def test_open_restaurant_sets_active_and_menu(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.load_restaurants()
        return await selection.open_restaurant("r1")

    opened = asyncio.run(scenario())
    assert opened == R1
    assert selection.state == ViewState.VIEWING
    assert selection.active_restaurant == R1
    assert [item.id for item in selection.menu] == ["a", "b"]
    assert selection.delivery_fee == 3.00
    assert cart.restaurant_id == "r1"


def test_open_restaurant_clears_cart_from_previous_restaurant(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.load_restaurants()
        await selection.open_restaurant("r0")
        cart.add_item(ITEM_C)
        cart.add_item(ITEM_C)
        await selection.open_restaurant("r1")

    asyncio.run(scenario())
    assert cart.is_empty
    assert selection.active_restaurant == R1


def test_reopening_same_restaurant_still_clears_cart(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.open_restaurant("r1")
        cart.add_item(ITEM_A)
        await selection.open_restaurant("r1")

    asyncio.run(scenario())
    assert cart.is_empty
    assert selection.active_restaurant == R1


def test_failed_open_leaves_previous_restaurant_and_cart(catalog):
    selection, cart = make_context(catalog)
    catalog.failing_menus.add("r1")

    async def scenario():
        await selection.load_restaurants()
        await selection.open_restaurant("r0")
        cart.add_item(ITEM_C)
        with pytest.raises(FetchError):
            await selection.open_restaurant("r1")

    asyncio.run(scenario())
    assert selection.active_restaurant == R0
    assert [item.id for item in selection.menu] == ["c"]
    assert [(line.id, line.qty) for line in cart.lines] == [("c", 1)]
    assert cart.restaurant_id == "r0"


def test_unknown_restaurant_refreshes_list_then_fails_not_found(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.load_restaurants()
        with pytest.raises(FetchError, match="not found"):
            await selection.open_restaurant("nope")

    asyncio.run(scenario())
    assert catalog.count("list_restaurants") == 2
    assert catalog.count("get_menu") == 0
    assert selection.state == ViewState.BROWSING


def test_open_without_loaded_list_fetches_it(catalog):
    selection, _ = make_context(catalog)
    opened = asyncio.run(selection.open_restaurant("r0"))

    assert opened == R0
    assert len(selection.restaurants) == 3


def test_close_restaurant_returns_to_browsing_and_keeps_cart(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.open_restaurant("r1")
        cart.add_item(ITEM_A)

    asyncio.run(scenario())
    selection.close_restaurant()

    assert selection.state == ViewState.BROWSING
    assert selection.active_restaurant is None
    assert selection.menu == ()
    assert [(line.id, line.qty) for line in cart.lines] == [("a", 1)]


def test_stale_open_is_discarded_when_newer_open_resolves_first(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.load_restaurants()
        gate = asyncio.Event()
        catalog.menu_gates["r0"] = gate

        slow = asyncio.create_task(selection.open_restaurant("r0"))
        await asyncio.sleep(0)
        fast = await selection.open_restaurant("r1")
        cart.add_item(ITEM_A)

        gate.set()
        return fast, await slow

    fast, slow = asyncio.run(scenario())
    assert fast == R1
    assert slow is None
    assert selection.active_restaurant == R1
    assert [line.id for line in cart.lines] == ["a"]
    assert cart.restaurant_id == "r1"


def test_stale_failure_is_discarded(catalog):
    selection, _ = make_context(catalog)
    catalog.failing_menus.add("r0")

    async def scenario():
        await selection.load_restaurants()
        gate = asyncio.Event()
        catalog.menu_gates["r0"] = gate

        slow = asyncio.create_task(selection.open_restaurant("r0"))
        await asyncio.sleep(0)
        await selection.open_restaurant("r1")
        gate.set()
        return await slow

    assert asyncio.run(scenario()) is None
    assert selection.active_restaurant == R1


def test_close_invalidates_in_flight_open(catalog):
    selection, cart = make_context(catalog)

    async def scenario():
        await selection.load_restaurants()
        gate = asyncio.Event()
        catalog.menu_gates["r1"] = gate

        pending = asyncio.create_task(selection.open_restaurant("r1"))
        await asyncio.sleep(0)
        selection.close_restaurant()
        gate.set()
        return await pending

    assert asyncio.run(scenario()) is None
    assert selection.state == ViewState.BROWSING
