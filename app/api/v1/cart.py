from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims
from app.db.session import get_db
from app.schemas.cart import CartItemCreate, CartItemUpdate
from app.schemas.token import SessionClaims
from app.services.cart_service import CartService
from app.utils.response import success

router = APIRouter()


@router.get("", response_model=dict)
def get_cart(
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Get user's cart"""
    return success(data=CartService.snapshot(db, claims.user_id), message="Cart retrieved")


@router.post("", response_model=dict)
def add_to_cart(
    cart_item: CartItemCreate,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Add item to cart; repeated products increase the existing quantity"""
    cart = CartService.add(db, claims.user_id, cart_item.product_id, cart_item.quantity)
    return success(data=cart, message="Cart updated")


@router.put("/{product_id}", response_model=dict)
def update_cart_item(
    product_id: int,
    update_data: CartItemUpdate,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Set item quantity; a quantity below 1 removes the item"""
    cart = CartService.set_quantity(db, claims.user_id, product_id, update_data.quantity)
    return success(data=cart, message="Cart item updated")


@router.delete("/{product_id}", response_model=dict)
def remove_from_cart(
    product_id: int,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Remove item from cart"""
    cart = CartService.remove(db, claims.user_id, product_id)
    return success(data=cart, message="Item removed from cart")
