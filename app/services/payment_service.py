from typing import List, Optional

import structlog
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import (
    AlreadyPaid,
    Forbidden,
    InternalError,
    InvalidCardData,
    OrderNotFound,
)
from app.models.order import Order, OrderStatus, PaymentMethod
from app.models.payment import Payment
from app.schemas.payment import CardDetails
from app.schemas.token import SessionClaims
from app.services.auth_service import AuthService
from app.services.order_service import OrderService, parse_payment_method
from app.utils.cards import mask_card

logger = structlog.get_logger()


class PaymentService:

    @staticmethod
    def record(
        db: Session,
        order_id: int,
        method: str,
        card: Optional[CardDetails],
        claims: SessionClaims,
    ) -> Payment:
        """
        Record the single payment for an order and move the order to paid.

        Both writes share one transaction: if the status move is rejected the
        payment row is rolled back with it.
        """
        payment_method = parse_payment_method(method)

        card_last4 = None
        card_expiry = None
        if payment_method == PaymentMethod.CARD:
            if card is None:
                raise InvalidCardData("Card details are required for card payments")
            card_last4, card_expiry = mask_card(card.number.get_secret_value(), card.expiry)

        payment = None
        try:
            order = (
                db.query(Order)
                .filter(Order.id == order_id)
                .with_for_update()
                .first()
            )
            if not order:
                raise OrderNotFound()

            if order.user_id != claims.user_id and not claims.is_admin:
                raise Forbidden("You can only pay for your own orders")

            existing = db.query(Payment).filter(Payment.order_id == order.id).first()
            if existing:
                raise AlreadyPaid()

            payment = Payment(
                order_id=order.id,
                user_id=order.user_id,
                method=payment_method,
                amount=order.total,
                card_last4=card_last4,
                card_expiry=card_expiry,
            )
            db.add(payment)
            db.flush()

            OrderService.transition(
                order,
                OrderStatus.PAID,
                changed_by=claims.user_id,
                reason="payment",
                via_payment=True,
            )
            db.commit()
        except IntegrityError:
            # Unique order_id: a concurrent request recorded the payment first
            db.rollback()
            raise AlreadyPaid()
        except HTTPException:
            db.rollback()
            if payment is not None:
                logger.warning("payment_rollback", order_id=order_id)
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception("payment_record_failed", order_id=order_id)
            raise InternalError()

        db.refresh(payment)
        logger.info(
            "payment_recorded",
            payment_id=payment.id,
            order_id=payment.order_id,
            method=payment_method.value,
            amount=payment.amount,
            card_last4=card_last4,
        )
        return payment

    @staticmethod
    def get(db: Session, order_id: int) -> Optional[Payment]:
        """Payment for an order, or None when the order is unpaid."""
        return db.query(Payment).filter(Payment.order_id == order_id).first()

    @staticmethod
    def list_all(db: Session, claims: SessionClaims) -> List[Payment]:
        AuthService.require_admin(claims)
        return (
            db.query(Payment)
            .options(selectinload(Payment.user), selectinload(Payment.order))
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )

    @staticmethod
    def serialize(payment: Optional[Payment]) -> Optional[dict]:
        if payment is None:
            return None
        return {
            "id": payment.id,
            "order_id": payment.order_id,
            "user_id": payment.user_id,
            "method": payment.method.value,
            "amount": payment.amount,
            "masked_card": payment.masked_card,
            "card_expiry": payment.card_expiry,
            "created_at": payment.created_at,
        }
