from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims
from app.core.rate_limiter import limiter
from app.db.session import get_db
from app.schemas.order import OrderCreate
from app.schemas.token import SessionClaims
from app.services.order_service import OrderService
from app.utils.response import success

router = APIRouter()


@router.post(
    "",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="""
Creates an order from the authenticated user's cart.

Process:
1. Locks the cart and rejects an empty or absent cart
2. Copies the cart lines (product, quantity, captured price) into the order
3. Creates the order as confirmed and deletes the cart in the same transaction
""",
    responses={
        201: {"description": "Order placed"},
        400: {"description": "Cart empty or invalid payment method"},
        401: {"description": "Authentication required"},
    },
)
@limiter.limit("20/minute")
def place_order(
    request: Request,
    order_data: OrderCreate,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    order = OrderService.place(db, claims.user_id, order_data.payment_method)
    return success(
        data={
            "order_id": order.id,
            "status": order.status.value,
            "total": order.total,
        },
        message="Order placed successfully",
    )


@router.get("", response_model=dict)
def get_user_orders(
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Get user's order history, newest first"""
    orders = OrderService.list_for_user(db, claims.user_id)
    return success(data=[OrderService.serialize(order) for order in orders], message="Orders retrieved")


@router.get("/{order_id}", response_model=dict)
def get_order_detail(
    order_id: int,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Get order details"""
    order = OrderService.get_for_requester(db, order_id, claims)
    return success(
        data=OrderService.serialize(order, include_history=True),
        message="Order detail retrieved",
    )
