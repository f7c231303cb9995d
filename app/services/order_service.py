"""订单服务实现"""

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List, Optional, Tuple
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging

from app.models.product import Product
from app.models.order import Order, OrderItem, OrderStatus, PaymentStatus
from app.schemas.order import PlaceOrderRequest

logger = logging.getLogger(__name__)

MONEY_QUANT = Decimal("0.01")
# Numeric(10, 2) 能存下的最大金额
MONEY_MAX = Decimal("99999999.99")
# Integer 列上限
MAX_DB_INTEGER = 2 ** 31 - 1
# JSON 数字能精确表示的最大整数
MAX_JSON_INTEGER = 2 ** 53 - 1
ORDER_LIST_LIMIT = 200


def coerce_number(value: Any) -> Optional[Decimal]:
    """宽松数字转换：无法解析或非有限数返回 None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def coerce_money(value: Any) -> Decimal:
    """可选金额字段：缺失 / 非数字 / 负数 / 超出金额列范围一律按 0 处理"""
    number = coerce_number(value)
    if number is None or number < 0 or number > MONEY_MAX:
        return Decimal("0.00")
    return number.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def _positive_int(value: Any, maximum: int) -> Optional[int]:
    number = coerce_number(value)
    if number is None or number <= 0:
        return None
    # 先比较上限再转 int，"1e1000000" 之类的输入不能展开成整数
    if number > maximum or number != number.to_integral_value():
        return None
    return int(number)


def normalize_items(items: List[Any]) -> List[Tuple[int, int]]:
    """归一化购物车行 -> [(product_id, quantity)]

    productId / quantity 不是正整数的行直接丢弃，不补零、不合并。
    productId 超过 JSON 安全整数、quantity 超过 Integer 列上限的行同样丢弃。
    """
    normalized = []
    for item in items:
        if not isinstance(item, dict):
            continue
        product_id = _positive_int(item.get("productId"), MAX_JSON_INTEGER)
        quantity = _positive_int(item.get("quantity"), MAX_DB_INTEGER)
        if product_id is None or quantity is None:
            continue
        normalized.append((product_id, quantity))
    return normalized


class OrderService:
    """订单核心服务类"""

    def __init__(self, db: Session):
        self.db = db

    def place_order(self, customer_id: Optional[int], request: PlaceOrderRequest) -> Order:
        """下单（校验 -> 服务端定价 -> 单事务写入订单头和明细）"""
        contact = request.customer
        missing = contact.missing_fields()
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Missing customer fields: {', '.join(missing)}"
            )

        if not request.payment_method:
            raise HTTPException(status_code=400, detail="Payment method is required")

        if not request.items:
            raise HTTPException(status_code=400, detail="Order items are required")

        lines = normalize_items(request.items)
        if not lines:
            raise HTTPException(status_code=400, detail="Invalid order items")

        shipping = coerce_money(request.shipping)
        tax = coerce_money(request.tax)
        payment_status = request.payment_status or PaymentStatus.PENDING.value

        try:
            # 一次查询批量取价，读与写在同一事务内
            # 超出 Integer 列范围的 ID 不可能存在，不参与查询，按未知商品处理
            product_ids = sorted({
                product_id for product_id, _ in lines if product_id <= MAX_DB_INTEGER
            })
            products = []
            if product_ids:
                products = self.db.execute(
                    select(Product).where(Product.id.in_(product_ids))
                ).scalars().all()
            products_by_id = {product.id: product for product in products}

            for product_id, _ in lines:
                if product_id not in products_by_id:
                    raise HTTPException(
                        status_code=400,
                        detail=f"Unknown product id: {product_id}"
                    )

            subtotal = Decimal("0.00")
            order_items = []
            for product_id, quantity in lines:
                product = products_by_id[product_id]
                unit_price = Decimal(str(product.price))
                line_total = unit_price * quantity
                subtotal += line_total
                order_items.append(OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                ))

            total = subtotal + shipping + tax
            if total > MONEY_MAX:
                raise HTTPException(status_code=400, detail="Order total exceeds maximum")

            order = Order(
                customer_id=customer_id,
                customer_name=contact.full_name,
                email=contact.email,
                phone=contact.phone,
                street=contact.street,
                city=contact.city,
                region=contact.region,
                status=OrderStatus.PENDING.value,
                payment_method=request.payment_method,
                payment_status=payment_status,
                subtotal=subtotal,
                shipping=shipping,
                tax=tax,
                total=total,
                items=order_items,
            )
            self.db.add(order)
            self.db.commit()
            logger.info(
                f"下单成功: order_id={order.id}, customer_id={customer_id}, "
                f"items={len(order_items)}, total={total}"
            )
            return order

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"下单失败: customer_id={customer_id}, error={str(e)}")
            raise

    def get_order(self, order_id: int) -> Order:
        """按ID查询订单（含明细）"""
        order = self.db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
        ).scalar_one_or_none()

        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    def get_customer_order(self, customer_id: int, order_id: int) -> Order:
        """查询客户自己的订单，不属于该客户按不存在处理"""
        order = self.db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .where(
                Order.id == order_id,
                Order.customer_id == customer_id
            )
        ).scalar_one_or_none()

        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    def list_orders(self, limit: int = ORDER_LIST_LIMIT) -> List[Tuple[Order, int]]:
        """后台订单列表：[(订单, 商品件数)]"""
        orders = self.db.execute(
            select(Order)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
        ).scalars().all()

        if not orders:
            return []

        quantity_rows = self.db.execute(
            select(OrderItem.order_id, func.sum(OrderItem.quantity))
            .where(OrderItem.order_id.in_([o.id for o in orders]))
            .group_by(OrderItem.order_id)
        ).all()
        quantities: Dict[int, int] = {order_id: int(qty or 0) for order_id, qty in quantity_rows}

        return [(order, quantities.get(order.id, 0)) for order in orders]

    def list_customer_orders(self, customer_id: int, limit: int = ORDER_LIST_LIMIT) -> List[Order]:
        """客户自己的订单列表（新 -> 旧）"""
        return self.db.execute(
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
        ).scalars().all()

    def update_status(
        self,
        order_id: int,
        status: Optional[str] = None,
        payment_status: Optional[str] = None
    ) -> Order:
        """后台修改订单状态 / 支付状态，不重算金额"""
        if not status and not payment_status:
            raise HTTPException(status_code=400, detail="No fields to update")

        try:
            order = self.db.execute(
                select(Order).where(Order.id == order_id).with_for_update()
            ).scalar_one_or_none()

            if not order:
                raise HTTPException(status_code=404, detail="Order not found")

            if status:
                order.status = status
            if payment_status:
                order.payment_status = payment_status

            self.db.commit()
            logger.info(
                f"订单状态已更新: order_id={order_id}, status={order.status}, "
                f"payment_status={order.payment_status}"
            )
            return order

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"更新订单状态失败: order_id={order_id}, error={str(e)}")
            raise
