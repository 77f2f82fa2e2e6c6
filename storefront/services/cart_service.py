# storefront/services/cart_service.py
import logging

from sqlmodel import Session

from storefront.core.errors import ApiError, InvalidArgument, StoreError, ValidationError
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.utils import is_positive_int, require_positive_id
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemQuantityUpdate,
    CartRead,
)
from storefront.schemas.user import TokenClaims

logger = logging.getLogger(__name__)


def _parse_product_id(raw) -> int:
    try:
        return require_positive_id(raw, "product ID")
    except InvalidArgument as exc:
        raise ApiError(400, "Invalid product ID", "INVALID_PRODUCT_ID") from exc


class CartService:
    """
    Business logic for cart operations.

    Every mutating operation answers with the full cart after the change.
    The cart belongs to the user in the access token.
    """

    def __init__(self, cart_repo: CartRepository):
        self.cart_repo = cart_repo

    # ---- internal helpers ----

    def _items(self, session: Session, user_id: int, error: str = "Error fetching cart") -> CartRead:
        try:
            items = self.cart_repo.list_by_user(session, user_id)
        except StoreError as exc:
            logger.error("%s: %s", error, exc)
            raise ApiError(500, error, "DB_ERROR") from exc
        return CartRead(items=items)

    # ---- public operations ----

    def get_cart(self, session: Session, claims: TokenClaims) -> CartRead:
        cart = self._items(session, claims.id)
        if not cart.items:
            cart.message = "No items in cart"
        return cart

    def add_item(
        self,
        session: Session,
        claims: TokenClaims,
        payload: CartItemCreate,
    ) -> CartRead:
        """
        Add a product, merging with an existing row for the same product
        (quantities add up; title/price/image take the new values).
        """
        product_id = _parse_product_id(payload.productId)
        item = {
            "id": product_id,
            "title": payload.title,
            "price": payload.price,
            "image": payload.image,
            "quantity": payload.quantity,
        }

        logger.info("Adding product %s to cart of user %s", product_id, claims.id)
        try:
            # claims.email is the email the user had when the token was issued
            self.cart_repo.add_or_merge(session, claims.id, claims.email, item)
        except ValidationError as exc:
            raise ApiError(400, str(exc), "VALIDATION_ERROR") from exc
        except StoreError as exc:
            logger.error("Cart update error: %s", exc)
            raise ApiError(500, "Failed to update cart", "DB_ERROR") from exc

        return self._items(session, claims.id, "Error fetching updated cart")

    def update_quantity(
        self,
        session: Session,
        claims: TokenClaims,
        raw_product_id,
        payload: CartItemQuantityUpdate,
    ) -> CartRead:
        """
        Set the quantity of a product already in the cart.

        Missing row => 404.
        """
        product_id = _parse_product_id(raw_product_id)
        quantity = payload.quantity
        if not is_positive_int(quantity):
            raise ApiError(400, "Invalid quantity", "INVALID_QUANTITY")

        try:
            changed = self.cart_repo.set_quantity(session, claims.id, product_id, quantity)
        except StoreError as exc:
            logger.error("Cart quantity update error: %s", exc)
            raise ApiError(500, "Failed to update cart item quantity", "DB_ERROR") from exc

        if not changed:
            raise ApiError(404, "Cart item not found", "CART_ITEM_NOT_FOUND")
        return self._items(session, claims.id, "Error fetching updated cart")

    def remove_item(
        self,
        session: Session,
        claims: TokenClaims,
        raw_product_id,
    ) -> CartRead:
        product_id = _parse_product_id(raw_product_id)
        try:
            removed = self.cart_repo.remove(session, claims.id, product_id)
        except StoreError as exc:
            logger.error("Cart item removal error: %s", exc)
            raise ApiError(500, "Failed to remove cart item", "DB_ERROR") from exc

        if not removed:
            raise ApiError(404, "Cart item not found", "CART_ITEM_NOT_FOUND")
        return self._items(session, claims.id, "Error fetching updated cart")
