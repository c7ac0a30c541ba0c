from app.models.user import User
from app.models.product import Product
from app.models.cart import Cart, CartItem
from app.models.order import Order, OrderItem, OrderStatus, PaymentMethod
from app.models.order_status_history import OrderStatusHistory
from app.models.payment import Payment
from app.models.card_info import CardInfo
from app.models.contact_message import ContactMessage, ContactMessageStatus
