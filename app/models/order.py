import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    TIMESTAMP,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


# 1️ 订单状态 / 支付状态（存储为字符串，后台可改写）

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# 2️ 订单头表（下单时的客户信息快照）

class Order(Base):
    __tablename__ = "orders"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # 游客订单为空
    customer_id = Column(
        Integer,
        ForeignKey("customers.id"),
        nullable=True,
        index=True,
        comment="下单客户ID",
    )

    customer_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)
    region = Column(String(255), nullable=True)

    status = Column(
        String(50),
        nullable=False,
        server_default=OrderStatus.PENDING.value,
        comment="订单状态",
    )

    payment_method = Column(
        String(50),
        nullable=False,
        comment="支付方式",
    )

    payment_status = Column(
        String(50),
        nullable=False,
        server_default=PaymentStatus.PENDING.value,
        comment="支付状态",
    )

    subtotal = Column(Numeric(10, 2), nullable=False, server_default="0")
    shipping = Column(Numeric(10, 2), nullable=False, server_default="0")
    tax = Column(Numeric(10, 2), nullable=False, server_default="0")
    total = Column(Numeric(10, 2), nullable=False, server_default="0")

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    __table_args__ = (
        CheckConstraint("subtotal >= 0", name="ck_orders_subtotal_non_negative"),
        CheckConstraint("shipping >= 0", name="ck_orders_shipping_non_negative"),
        CheckConstraint("tax >= 0", name="ck_orders_tax_non_negative"),
        CheckConstraint("total >= 0", name="ck_orders_total_non_negative"),
    )


# 3️ 订单明细表（商品名称 / 单价快照，不随商品变更）

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="订单ID",
    )

    product_id = Column(
        Integer,
        ForeignKey("products.id"),
        nullable=False,
        comment="商品ID",
    )

    product_name = Column(
        String(255),
        nullable=False,
        comment="下单时商品名称",
    )

    quantity = Column(
        Integer,
        nullable=False,
    )

    unit_price = Column(
        Numeric(10, 2),
        nullable=False,
        comment="下单时单价",
    )

    line_total = Column(
        Numeric(10, 2),
        nullable=False,
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )


# 4️ 高频查询优化索引

Index(
    "idx_orders_customer_created_desc",
    Order.customer_id,
    Order.created_at.desc(),
)
