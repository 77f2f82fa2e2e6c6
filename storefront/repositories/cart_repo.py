# storefront/repositories/cart_repo.py
import logging
from collections.abc import Mapping
from datetime import datetime, timezone

from sqlalchemy import delete, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from storefront.core.errors import StoreError, ValidationError
from storefront.models.cart import CartItem
from storefront.repositories.utils import clean_text, is_positive_int, require_positive_id
from storefront.schemas.cart import CartItemRead

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_item(item: Mapping) -> dict:
    """
    Turn an incoming cart item into column values.

    Input keys: id (product id, required), title, price, image, quantity.

    Defaults:
      - quantity: 1 unless a positive integer (up to MAX_INT64) is given
      - title / image: trimmed, "" when missing
      - price: 0 unless a number is given

    Raises:
        ValidationError: no usable product id, or a negative or out-of-range price.
    """
    if not isinstance(item, Mapping):
        raise ValidationError("Each cart item must be an object with an id property")

    product_id = require_positive_id(item.get("id"), "product ID")

    price = item.get("price")
    try:
        price = float(price) if _is_number(price) else 0.0
    except OverflowError as exc:
        raise ValidationError("Price is out of range") from exc
    if price < 0:
        raise ValidationError("Price cannot be negative")

    quantity = item.get("quantity")
    if not is_positive_int(quantity):
        quantity = 1

    return {
        "product_id": product_id,
        "title": clean_text(item.get("title")),
        "price": price,
        "image": clean_text(item.get("image")),
        "quantity": quantity,
    }


class CartRepository:
    """
    Cart store: one row per (user, product).

    Adds merge into the existing row (quantity accumulates, descriptive
    fields are overwritten). Every mutation except replace_all is a
    single statement.
    """

    # Get items for a user
    def list_by_user(self, session: Session, user_id) -> list[CartItemRead]:
        user_id = require_positive_id(user_id)
        stmt = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        try:
            rows = session.exec(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

        logger.debug("Found %d cart items for user %s", len(rows), user_id)
        return [
            CartItemRead(
                id=row.product_id,
                email=row.email,
                title=row.title,
                price=row.price,
                image=row.image,
                quantity=row.quantity,
            )
            for row in rows
        ]

    def add_or_merge(self, session: Session, user_id, email: str, item: Mapping) -> int:
        """
        Insert a cart row, or merge into the existing (user, product) row.

        On conflict:
          - quantity = existing quantity + incoming quantity
          - title / price / image = incoming values

        Returns:
            The row id of the inserted or merged row.
        """
        user_id = require_positive_id(user_id)
        email = clean_text(email)
        if not email:
            raise ValidationError("Valid email is required")
        values = normalize_item(item)

        insert = self._insert_for(session)
        stmt = insert(CartItem).values(
            user_id=user_id,
            email=email,
            created_at=datetime.now(timezone.utc),
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "product_id"],
            set_={
                "quantity": CartItem.quantity + stmt.excluded.quantity,
                "title": stmt.excluded.title,
                "price": stmt.excluded.price,
                "image": stmt.excluded.image,
            },
        )

        try:
            session.exec(stmt)
            session.commit()
            row_id = session.exec(
                select(CartItem.id).where(
                    CartItem.user_id == user_id,
                    CartItem.product_id == values["product_id"],
                )
            ).one()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        return row_id

    def set_quantity(self, session: Session, user_id, product_id, quantity) -> bool:
        """
        Set the quantity of an existing row (absolute, not additive).

        Returns:
            False if the user has no row for this product.
        """
        user_id = require_positive_id(user_id)
        product_id = require_positive_id(product_id, "product ID")
        if not is_positive_int(quantity):
            raise ValidationError("Quantity must be a positive number")

        stmt = (
            update(CartItem)
            .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .values(quantity=quantity)
        )
        return self._execute_rowcount(session, stmt) > 0

    def remove(self, session: Session, user_id, product_id) -> bool:
        user_id = require_positive_id(user_id)
        product_id = require_positive_id(product_id, "product ID")
        stmt = delete(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return self._execute_rowcount(session, stmt) > 0

    def clear(self, session: Session, user_id) -> bool:
        user_id = require_positive_id(user_id)
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        return self._execute_rowcount(session, stmt) > 0

    def replace_all(self, session: Session, user_id, email: str, items) -> None:
        """
        Replace the whole cart in one transaction.

        Every item is validated before anything is written. The delete and
        the inserts are committed together; on any failure the transaction
        is rolled back and the previous cart stays intact.
        """
        user_id = require_positive_id(user_id)
        email = clean_text(email)
        if not email:
            raise ValidationError("Valid email is required")
        if not isinstance(items, (list, tuple)):
            raise ValidationError("cartItems must be an array")

        rows = [normalize_item(item) for item in items]
        now = datetime.now(timezone.utc)

        try:
            session.exec(delete(CartItem).where(CartItem.user_id == user_id))
            session.add_all(
                CartItem(user_id=user_id, email=email, created_at=now, **values)
                for values in rows
            )
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning("Cart replace rolled back for user %s: %s", user_id, exc)
            raise StoreError(str(exc)) from exc

    # ----- internal helpers -----

    def _execute_rowcount(self, session: Session, stmt) -> int:
        try:
            result = session.exec(stmt)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        return result.rowcount

    @staticmethod
    def _insert_for(session: Session):
        """Dialect insert construct that supports ON CONFLICT."""
        dialect = session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise StoreError(f"Cart upsert is not supported on {dialect}")
