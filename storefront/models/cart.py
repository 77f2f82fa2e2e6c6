# storefront/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart entry for a user.
    One user cannot have 2 rows for the same product: a second add
    merges into the existing row (see CartRepository.add_or_merge).

    `email` is a snapshot of the user's email when the item was added;
    it is not kept in sync with the users table.
    """

    __tablename__ = "carts"
    __table_args__ = (UniqueConstraint("user_id", "product_id"),)

    id: int | None = Field(default=None, primary_key=True)

    user_id: int = Field(index=True)
    product_id: int = Field(index=True)

    email: str

    title: str = ""
    price: float = Field(default=0.0, ge=0)
    image: str | None = None

    quantity: int = Field(
        default=1,
        gt=0,
        description="Must be >= 1",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
