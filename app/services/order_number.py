"""订单号编解码

订单号只由订单主键推导，不单独落库：
    1       -> ORD-000001
    1234567 -> ORD-1234567（超过 6 位不截断）
"""

import re
from typing import Optional

ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_WIDTH = 6

_ORDER_NUMBER_RE = re.compile(r"^ORD-(\d+)$", re.ASCII)


def format_order_number(order_id: int) -> str:
    """订单ID -> 订单号"""
    return f"{ORDER_NUMBER_PREFIX}{order_id:0{ORDER_NUMBER_WIDTH}d}"


def parse_order_number(value: Optional[str]) -> Optional[int]:
    """订单号 -> 订单ID，格式不合法返回 None"""
    if not value:
        return None

    match = _ORDER_NUMBER_RE.fullmatch(value.strip())
    if not match:
        return None

    order_id = int(match.group(1))
    return order_id if order_id > 0 else None
