from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.db.session import get_db
from app.schemas.order import OrderStatusUpdate
from app.schemas.product import ProductCreate, ProductUpdate
from app.schemas.token import SessionClaims
from app.schemas.user import UserUpdate
from app.services.card_info_service import CardInfoService
from app.services.catalog_service import CatalogService
from app.services.contact_service import ContactService
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService
from app.services.user_service import UserService
from app.utils.response import success

router = APIRouter()


def _order_with_payment(order) -> dict:
    data = OrderService.serialize(order)
    data["user"] = {"name": order.user.name, "email": order.user.email} if order.user else None
    data["payment"] = PaymentService.serialize(order.payment)
    return data


# ============= USERS =============

@router.get("/users", response_model=dict)
def list_users(
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: List all users (password hashes excluded)"""
    users = UserService.list_users(db)
    return success(data=[UserService.serialize(user) for user in users], message="Users retrieved")


@router.put("/users/{user_id}", response_model=dict)
def update_user(
    user_id: int,
    user_in: UserUpdate,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = UserService.update_user(db, user_id, user_in)
    return success(data=UserService.serialize(user), message="User updated successfully")


@router.delete("/users/{user_id}", response_model=dict)
def delete_user(
    user_id: int,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: Delete a customer account. Admin accounts are protected."""
    UserService.delete_user(db, user_id)
    return success(message="User deleted successfully")


# ============= PRODUCTS =============

@router.get("/products", response_model=dict)
def list_products(
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    products = CatalogService.list_products(db)
    return success(
        data=[CatalogService.serialize(product) for product in products],
        message="Products retrieved",
    )


@router.post("/products", response_model=dict, status_code=status.HTTP_201_CREATED)
def create_product(
    product_in: ProductCreate,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = CatalogService.create_product(db, product_in)
    return success(data=CatalogService.serialize(product), message="Product created successfully")


@router.get("/products/{product_id}", response_model=dict)
def get_product(
    product_id: int,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = CatalogService.get_product(db, product_id)
    return success(data=CatalogService.serialize(product), message="Product retrieved")


@router.put("/products/{product_id}", response_model=dict)
def update_product(
    product_id: int,
    product_in: ProductUpdate,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = CatalogService.update_product(db, product_id, product_in)
    return success(data=CatalogService.serialize(product), message="Product updated successfully")


@router.delete("/products/{product_id}", response_model=dict)
def delete_product(
    product_id: int,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    CatalogService.delete_product(db, product_id)
    return success(message="Product deleted successfully")


# ============= ORDERS & PAYMENTS =============

@router.get("/orders", response_model=dict)
def list_orders(
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: All orders, newest first, each with its payment (or null)"""
    orders = OrderService.list_all(db, current_admin)
    return success(data=[_order_with_payment(order) for order in orders], message="Orders retrieved")


@router.put("/orders/{order_id}", response_model=dict)
def update_order_status(
    order_id: int,
    status_update: OrderStatusUpdate,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    order = OrderService.update_status(db, order_id, status_update.status, current_admin)
    return success(data=_order_with_payment(order), message="Order status updated successfully")


@router.get("/payments", response_model=dict)
def list_payments(
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    payments = PaymentService.list_all(db, current_admin)
    data = []
    for payment in payments:
        entry = PaymentService.serialize(payment)
        entry["user"] = {"name": payment.user.name, "email": payment.user.email} if payment.user else None
        entry["order_status"] = payment.order.status.value if payment.order else None
        data.append(entry)
    return success(data=data, message="Payments retrieved")


@router.get("/card-info", response_model=dict)
def list_card_info(
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    cards = CardInfoService.list_all(db)
    return success(data=[CardInfoService.serialize(card) for card in cards], message="Card information retrieved")


# ============= CONTACT MESSAGES =============

@router.get("/contact-messages", response_model=dict)
def list_contact_messages(
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    messages = ContactService.list_messages(db)
    return success(data=[ContactService.serialize(message) for message in messages], message="Messages retrieved")


@router.put("/contact-messages/{message_id}/read", response_model=dict)
def mark_contact_message_read(
    message_id: int,
    current_admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    message = ContactService.mark_read(db, message_id)
    return success(data=ContactService.serialize(message), message="Message marked as read")
