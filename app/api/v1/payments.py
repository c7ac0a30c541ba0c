from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims
from app.db.session import get_db
from app.schemas.payment import PaymentCreate
from app.schemas.token import SessionClaims
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService
from app.utils.response import success

router = APIRouter()


@router.post(
    "",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment",
    description="""
Records the payment for an order and marks the order paid.

Card payments keep only the last four digits of the card number.
An order accepts exactly one payment.
""",
    responses={
        201: {"description": "Payment recorded"},
        400: {"description": "Invalid method or card details"},
        404: {"description": "Order not found"},
        409: {"description": "Order already paid or not payable"},
    },
)
def record_payment(
    payment_in: PaymentCreate,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    payment = PaymentService.record(
        db,
        payment_in.order_id,
        payment_in.method,
        payment_in.card,
        claims,
    )
    return success(data=PaymentService.serialize(payment), message="Payment processed successfully")


@router.get("/{order_id}", response_model=dict)
def get_payment(
    order_id: int,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """Payment for one of the caller's orders; data is null while unpaid"""
    order = OrderService.get_for_requester(db, order_id, claims)
    payment = PaymentService.get(db, order.id)
    return success(
        data=PaymentService.serialize(payment),
        message="Payment retrieved" if payment else "Order has no payment",
    )
