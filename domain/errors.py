# domain/errors.py - Error taxonomy for the ordering core


class OrderingError(Exception):
    """Base class for every recoverable ordering failure"""


class FetchError(OrderingError):
    """Catalog unreachable, returned an error status, or the resource was not found"""


class CheckoutError(OrderingError):
    """Order submission failed or the confirmation was malformed"""


class CartError(OrderingError):
    """Cart mutation that would break the cart invariants"""
