from fastapi import HTTPException, status
from typing import List


class EmailAlreadyExists(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Admin access required"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class AdminUserProtected(HTTPException):
    def __init__(self, action: str = "delete"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Cannot {action} admin user"
        )


class ProductNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )


class CartItemNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found in cart"
        )


class OrderNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )


class UserNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )


class ContactMessageNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found"
        )


class EmptyCart(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty"
        )


class InvalidPaymentMethod(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment method must be one of: cash, card"
        )


class InvalidStatus(HTTPException):
    def __init__(self, allowed: List[str]):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid status value. Must be one of: " + ", ".join(allowed)
        )


class InvalidStatusTransition(HTTPException):
    def __init__(self, current: str, requested: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move order from {current} to {requested}"
        )


class AlreadyPaid(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Payment already recorded for this order"
        )


class InvalidCardData(HTTPException):
    def __init__(self, reason: str = "Invalid card details"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=reason
        )


class InternalError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


class UserHasOrders(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete a user with existing orders"
        )


class PaymentRequired(HTTPException):
    def __init__(self, requested: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move order to {requested} before a payment is recorded"
        )


class QuantityLimitExceeded(HTTPException):
    def __init__(self, limit: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Quantity cannot exceed {limit} per item"
        )
