# storefront/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import CartItemCreate, CartItemQuantityUpdate, CartRead
from storefront.schemas.user import TokenClaims
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
service = CartService(cart_repo)


@router.get("", response_model=CartRead, response_model_exclude_none=True)
def get_my_cart(
    session: Session = Depends(get_session),
    claims: TokenClaims = Depends(require_auth),
):
    """
    Get current user's cart.
    """
    return service.get_cart(session, claims)


@router.post("", response_model=CartRead, response_model_exclude_none=True)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    claims: TokenClaims = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    Returns the updated cart.
    """
    return service.add_item(session, claims, payload)


@router.put("/{product_id}", response_model=CartRead, response_model_exclude_none=True)
def update_cart_item(
    product_id: str,
    payload: CartItemQuantityUpdate | None = None,
    session: Session = Depends(get_session),
    claims: TokenClaims = Depends(require_auth),
):
    """
    Update quantity of a product in the cart.

    Returns the updated cart.
    """
    return service.update_quantity(
        session, claims, product_id, payload or CartItemQuantityUpdate()
    )


@router.delete("/{product_id}", response_model=CartRead, response_model_exclude_none=True)
def remove_cart_item(
    product_id: str,
    session: Session = Depends(get_session),
    claims: TokenClaims = Depends(require_auth),
):
    """
    Remove a product from the cart.

    Returns the updated cart.
    """
    return service.remove_item(session, claims, product_id)
