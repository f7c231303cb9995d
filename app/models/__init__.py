# Models
from .product import Category, CategorySubsection, Product
from .customer import Customer, AdminUser, PasswordReset
from .order import Order, OrderItem, OrderStatus, PaymentStatus
from .contact_message import ContactMessage

__all__ = [
    "Category",
    "CategorySubsection",
    "Product",
    "Customer",
    "AdminUser",
    "PasswordReset",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "ContactMessage"
]
