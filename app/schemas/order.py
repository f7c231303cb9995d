# app/schemas/order.py
from pydantic import Field, field_validator
from typing import Any, List, Optional
from datetime import datetime

from app.schemas.base import CamelSchema
from app.services.order_number import format_order_number


def _as_text(value: Any) -> str:
    """宽松转换：None -> ""，其余转字符串并去首尾空白"""
    if value is None:
        return ""
    return str(value).strip()


# ==================== 请求模型 ====================

class CustomerContact(CamelSchema):
    """下单联系人 / 收货信息"""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    region: Optional[str] = None

    @field_validator("full_name", "email", "phone", "street", "city", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_text(value)

    @field_validator("region", mode="before")
    @classmethod
    def _coerce_region(cls, value):
        return _as_text(value) or None

    def missing_fields(self) -> List[str]:
        """必填字段中为空的字段名（对外名称）"""
        required = {
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
        }
        return [name for name, value in required.items() if not value]


class PlaceOrderRequest(CamelSchema):
    """下单请求

    shipping / tax / items 保持原始值，由 OrderService 统一做宽松归一化；
    客户端提交的单价字段一律忽略。
    """
    customer: CustomerContact = Field(default_factory=CustomerContact)
    payment_method: str = ""
    payment_status: Optional[str] = None
    shipping: Any = None
    tax: Any = None
    items: List[Any] = Field(default_factory=list)

    @field_validator("customer", mode="before")
    @classmethod
    def _coerce_customer(cls, value):
        if isinstance(value, (dict, CustomerContact)):
            return value
        return {}

    @field_validator("payment_method", mode="before")
    @classmethod
    def _coerce_payment_method(cls, value):
        return _as_text(value)

    @field_validator("payment_status", mode="before")
    @classmethod
    def _coerce_payment_status(cls, value):
        return _as_text(value) or None

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_items(cls, value):
        return value if isinstance(value, list) else []


class UpdateOrderRequest(CamelSchema):
    """后台修改订单状态"""
    status: Optional[str] = None
    payment_status: Optional[str] = None

    @field_validator("status", "payment_status", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_text(value) or None


# ==================== 响应模型 ====================

class PlaceOrderResponse(CamelSchema):
    id: int
    order_number: str
    total: float
    status: str
    payment_status: str


class OrderCustomer(CamelSchema):
    name: str
    email: str
    phone: str
    street: str
    city: str
    region: Optional[str] = None


class OrderItemDetail(CamelSchema):
    id: int
    product_id: int
    name: str
    quantity: int
    unit_price: float
    line_total: float


class OrderDetail(CamelSchema):
    id: int
    order_number: str
    customer: OrderCustomer
    status: str
    payment_method: str
    payment_status: str
    subtotal: float
    shipping: float
    tax: float
    total: float
    created_at: Optional[datetime] = None
    items: List[OrderItemDetail] = []

    @classmethod
    def from_order(cls, order) -> "OrderDetail":
        return cls(
            id=order.id,
            order_number=format_order_number(order.id),
            customer=OrderCustomer(
                name=order.customer_name,
                email=order.email,
                phone=order.phone,
                street=order.street,
                city=order.city,
                region=order.region,
            ),
            status=order.status,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            subtotal=float(order.subtotal or 0),
            shipping=float(order.shipping or 0),
            tax=float(order.tax or 0),
            total=float(order.total or 0),
            created_at=order.created_at,
            items=[
                OrderItemDetail(
                    id=item.id,
                    product_id=item.product_id,
                    name=item.product_name,
                    quantity=item.quantity,
                    unit_price=float(item.unit_price),
                    line_total=float(item.line_total),
                )
                for item in order.items
            ],
        )


class AdminOrderSummary(CamelSchema):
    """后台订单列表行"""
    id: int
    order_number: str
    customer: str
    email: str
    phone: str
    items: int
    total: float
    status: str
    payment_method: str
    payment_status: str
    date: Optional[datetime] = None


class CustomerOrderSummary(CamelSchema):
    """“我的订单”列表行"""
    id: int
    order_number: str
    total: float
    status: str
    payment_status: str
    date: Optional[datetime] = None

    @classmethod
    def from_order(cls, order) -> "CustomerOrderSummary":
        return cls(
            id=order.id,
            order_number=format_order_number(order.id),
            total=float(order.total or 0),
            status=order.status,
            payment_status=order.payment_status,
            date=order.created_at,
        )
