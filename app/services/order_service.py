from datetime import datetime
from typing import List, Optional

import structlog
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import (
    EmptyCart,
    InternalError,
    InvalidPaymentMethod,
    InvalidStatus,
    InvalidStatusTransition,
    OrderNotFound,
    PaymentRequired,
)
from app.models.order import Order, OrderItem, OrderStatus, PaymentMethod
from app.models.order_status_history import OrderStatusHistory
from app.schemas.token import SessionClaims
from app.services.auth_service import AuthService
from app.services.cart_service import CartService

logger = structlog.get_logger()

# Forward-only progression; cancelled is reachable from any non-terminal status.
STATUS_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PAID,
    OrderStatus.COMPLETED,
]
TERMINAL_STATUSES = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}


def parse_payment_method(value: Optional[str]) -> PaymentMethod:
    try:
        return PaymentMethod((value or "").strip().lower())
    except ValueError:
        raise InvalidPaymentMethod()


def parse_status(value: Optional[str]) -> OrderStatus:
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError:
        raise InvalidStatus([s.value for s in OrderStatus])


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    if current in TERMINAL_STATUSES:
        return False
    if new == OrderStatus.CANCELLED:
        return True
    return STATUS_PROGRESSION.index(new) > STATUS_PROGRESSION.index(current)


class OrderService:

    @staticmethod
    def transition(
        order: Order,
        new_status: OrderStatus,
        changed_by: Optional[int] = None,
        reason: Optional[str] = None,
        via_payment: bool = False,
    ) -> None:
        """
        Apply a status move in the current transaction. Caller commits.

        Only PaymentService.record moves an order to paid (``via_payment``);
        completed requires the order's payment to exist.
        """
        old_status = order.status
        if not can_transition(old_status, new_status):
            raise InvalidStatusTransition(old_status.value, new_status.value)
        if new_status == OrderStatus.PAID and not via_payment:
            raise PaymentRequired(new_status.value)
        if new_status == OrderStatus.COMPLETED and order.payment is None:
            raise PaymentRequired(new_status.value)

        order.status = new_status
        order.updated_at = datetime.utcnow()
        order.status_history.append(
            OrderStatusHistory(
                old_status=old_status.value,
                new_status=new_status.value,
                changed_by=changed_by,
                reason=reason,
            )
        )

    @staticmethod
    def place(db: Session, user_id: int, payment_method: str) -> Order:
        """Turn the user's cart into a confirmed order and delete the cart, atomically."""
        method = parse_payment_method(payment_method)

        try:
            cart = CartService.lock_cart(db, user_id)
            if cart is None or not cart.items:
                raise EmptyCart()

            order = Order(
                user_id=user_id,
                total=sum(item.price * item.quantity for item in cart.items),
                status=OrderStatus.CONFIRMED,
                payment_method=method,
            )
            for position, cart_item in enumerate(cart.items):
                product = cart_item.product
                order.items.append(
                    OrderItem(
                        position=position,
                        product_id=cart_item.product_id,
                        product_name=product.name if product else f"Product {cart_item.product_id}",
                        quantity=cart_item.quantity,
                        price=cart_item.price,
                    )
                )
            order.status_history.append(
                OrderStatusHistory(
                    old_status=None,
                    new_status=OrderStatus.CONFIRMED.value,
                    changed_by=user_id,
                    reason="placed",
                )
            )

            db.add(order)
            db.delete(cart)
            db.commit()
        except HTTPException:
            db.rollback()
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception("order_placement_failed", user_id=user_id)
            raise InternalError()

        db.refresh(order)
        logger.info(
            "order_placed",
            order_id=order.id,
            user_id=user_id,
            total=order.total,
            payment_method=method.value,
        )
        return order

    @staticmethod
    def update_status(
        db: Session,
        order_id: int,
        new_status: str,
        claims: SessionClaims,
    ) -> Order:
        """Admin-only status change along the order state machine."""
        AuthService.require_admin(claims)
        status = parse_status(new_status)

        try:
            order = (
                db.query(Order)
                .filter(Order.id == order_id)
                .with_for_update()
                .first()
            )
            if not order:
                raise OrderNotFound()

            old_status = order.status
            OrderService.transition(order, status, changed_by=claims.user_id, reason="admin")
            db.commit()
        except HTTPException:
            db.rollback()
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception("order_status_update_failed", order_id=order_id)
            raise InternalError()

        db.refresh(order)
        logger.info(
            "order_status_changed",
            order_id=order.id,
            old_status=old_status.value,
            new_status=status.value,
            changed_by=claims.user_id,
        )
        return order

    @staticmethod
    def list_for_user(db: Session, user_id: int) -> List[Order]:
        return (
            db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def list_all(db: Session, claims: SessionClaims) -> List[Order]:
        AuthService.require_admin(claims)
        return (
            db.query(Order)
            .options(
                selectinload(Order.items),
                selectinload(Order.user),
                selectinload(Order.payment),
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def get_for_requester(db: Session, order_id: int, claims: SessionClaims) -> Order:
        """Users see their own orders only; admins see all."""
        order = db.query(Order).filter(Order.id == order_id).first()
        if not order or (order.user_id != claims.user_id and not claims.is_admin):
            raise OrderNotFound()
        return order

    @staticmethod
    def serialize(order: Order, include_history: bool = False) -> dict:
        data = {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "payment_method": order.payment_method.value,
            "total": order.total,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "price": item.price,
                }
                for item in order.items
            ],
            "created_at": order.created_at,
            "updated_at": order.updated_at,
        }
        if include_history:
            data["status_history"] = [
                {
                    "old_status": entry.old_status,
                    "new_status": entry.new_status,
                    "changed_by": entry.changed_by,
                    "reason": entry.reason,
                    "created_at": entry.created_at,
                }
                for entry in order.status_history
            ]
        return data
