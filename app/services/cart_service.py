from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import CartItemNotFound, ProductNotFound, QuantityLimitExceeded
from app.models.cart import Cart, CartItem
from app.models.product import Product
from app.schemas.cart import MAX_ITEM_QUANTITY

logger = structlog.get_logger()


def _empty_cart() -> dict:
    return {"items": [], "total": 0, "total_items": 0}


class CartService:
    """Per-user cart. Every mutation holds the cart row lock for its read-modify-write."""

    @staticmethod
    def lock_cart(db: Session, user_id: int, create: bool = False) -> Optional[Cart]:
        cart = (
            db.query(Cart)
            .filter(Cart.user_id == user_id)
            .with_for_update()
            .first()
        )
        if cart or not create:
            return cart

        cart = Cart(user_id=user_id, total=0)
        db.add(cart)
        try:
            db.flush()
        except IntegrityError:
            # A concurrent request created the cart first; lock that one instead.
            db.rollback()
            cart = (
                db.query(Cart)
                .filter(Cart.user_id == user_id)
                .with_for_update()
                .one()
            )
        return cart

    @staticmethod
    def _recompute_total(cart: Cart) -> None:
        cart.total = sum(item.price * item.quantity for item in cart.items)

    @staticmethod
    def _find_item(cart: Optional[Cart], product_id: int) -> Optional[CartItem]:
        if cart is None:
            return None
        return next((item for item in cart.items if item.product_id == product_id), None)

    @staticmethod
    def serialize(cart: Optional[Cart]) -> dict:
        if cart is None:
            return _empty_cart()

        items = []
        for item in cart.items:
            product = item.product
            items.append({
                "product_id": item.product_id,
                "product_name": product.name if product else None,
                "product_image": product.image if product else None,
                "quantity": item.quantity,
                "price": item.price,
                "line_total": item.price * item.quantity,
            })

        return {
            "items": items,
            "total": cart.total,
            "total_items": sum(item.quantity for item in cart.items),
        }

    @staticmethod
    def add(db: Session, user_id: int, product_id: int, quantity: int) -> dict:
        """Add a product, merging into an existing line at its originally captured price."""
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFound()

        try:
            cart = CartService.lock_cart(db, user_id, create=True)
            existing_item = CartService._find_item(cart, product_id)

            if existing_item:
                if existing_item.quantity + quantity > MAX_ITEM_QUANTITY:
                    raise QuantityLimitExceeded(MAX_ITEM_QUANTITY)
                existing_item.quantity += quantity
            else:
                cart.items.append(
                    CartItem(product_id=product.id, quantity=quantity, price=product.price)
                )

            CartService._recompute_total(cart)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(cart)
        logger.info(
            "cart_item_added",
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            merged=existing_item is not None,
        )
        return CartService.serialize(cart)

    @staticmethod
    def remove(db: Session, user_id: int, product_id: int) -> dict:
        try:
            cart = CartService.lock_cart(db, user_id)
            item = CartService._find_item(cart, product_id)
            if not item:
                raise CartItemNotFound()

            cart.items.remove(item)
            CartService._recompute_total(cart)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(cart)
        logger.info("cart_item_removed", user_id=user_id, product_id=product_id)
        return CartService.serialize(cart)

    @staticmethod
    def set_quantity(db: Session, user_id: int, product_id: int, quantity: int) -> dict:
        if quantity < 1:
            return CartService.remove(db, user_id, product_id)

        try:
            cart = CartService.lock_cart(db, user_id)
            item = CartService._find_item(cart, product_id)
            if not item:
                raise CartItemNotFound()

            item.quantity = quantity
            CartService._recompute_total(cart)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(cart)
        logger.info("cart_item_updated", user_id=user_id, product_id=product_id, quantity=quantity)
        return CartService.serialize(cart)

    @staticmethod
    def snapshot(db: Session, user_id: int) -> dict:
        """Read-only view of the cart; an absent cart reads as empty."""
        cart = db.query(Cart).filter(Cart.user_id == user_id).first()
        return CartService.serialize(cart)

    @staticmethod
    def drop_product(db: Session, product_id: int) -> int:
        """Remove a product from every cart and fix totals. Caller commits."""
        carts = (
            db.query(Cart)
            .join(CartItem, CartItem.cart_id == Cart.id)
            .filter(CartItem.product_id == product_id)
            .with_for_update()
            .all()
        )
        for cart in carts:
            item = CartService._find_item(cart, product_id)
            if item:
                cart.items.remove(item)
            CartService._recompute_total(cart)
        return len(carts)
