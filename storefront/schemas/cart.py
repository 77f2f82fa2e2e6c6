# storefront/schemas/cart.py
from typing import Any

from sqlmodel import SQLModel


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    `quantity` defaults to 1 when missing or not a positive integer;
    title/price/image overwrite the stored values on merge.
    """

    productId: Any = None
    quantity: Any = None
    title: str | None = None
    price: Any = None
    image: str | None = None


class CartItemQuantityUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart item (absolute, not additive).
    """

    quantity: Any = None


class CartItemRead(SQLModel):
    """
    Read model for a single cart item.

    `id` is the product id, not the internal row id.
    """

    id: int
    email: str
    title: str
    price: float
    image: str | None = None
    quantity: int


class CartRead(SQLModel):
    """Full cart response."""

    items: list[CartItemRead]
    message: str | None = None
