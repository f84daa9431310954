"""Shopping cart persisted to durable key-value storage."""

from storefront.cart.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from storefront.cart.store import DEFAULT_CART_KEY, CartItem, CartStore, decode_cart, encode_cart

__all__ = [
    "DEFAULT_CART_KEY",
    "CartItem",
    "CartStore",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "decode_cart",
    "encode_cart",
]
