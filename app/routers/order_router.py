"""订单 API 路由（下单 / 后台订单管理 / 我的订单）"""

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response
from typing import List
import json
import logging

from app.core.dependencies import (
    get_order_service,
    get_current_customer,
    get_current_admin,
)
from app.core.security import Identity
from app.services.order_service import OrderService
from app.services.order_number import format_order_number, parse_order_number
from app.schemas.base import ErrorResponse
from app.schemas.order import (
    PlaceOrderRequest,
    PlaceOrderResponse,
    UpdateOrderRequest,
    OrderDetail,
    AdminOrderSummary,
    CustomerOrderSummary,
)

logger = logging.getLogger(__name__)

COMMON_RESPONSES = {
    400: {"model": ErrorResponse, "description": "请求参数错误"},
    401: {"model": ErrorResponse, "description": "未登录或无权限"},
    404: {"model": ErrorResponse, "description": "订单不存在"},
    500: {"model": ErrorResponse, "description": "服务器内部错误"}
}

router = APIRouter(
    prefix="/orders",
    tags=["订单"],
    responses=COMMON_RESPONSES
)

me_router = APIRouter(
    prefix="/me/orders",
    tags=["我的订单"],
    responses=COMMON_RESPONSES
)


async def read_json_body(request: Request) -> dict:
    """宽松读取 JSON 请求体，无法解析时按空对象处理"""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


@router.post(
    "",
    response_model=PlaceOrderResponse,
    status_code=201,
    summary="下单",
    description="""根据购物车创建订单。

    **特点：**
    - 单价以服务端商品价格为准，忽略客户端提交的价格
    - 一次查询批量取价，任一商品不存在则整单拒绝
    - 订单头与明细在同一数据库事务中写入
    - 不扣减、不预占库存
    """,
)
async def place_order(
    request: Request,
    customer: Identity = Depends(get_current_customer),
    service: OrderService = Depends(get_order_service)
):
    """下单（需客户登录，身份校验先于请求体校验）"""
    try:
        payload = PlaceOrderRequest.model_validate(await read_json_body(request))
        order = service.place_order(customer.id, payload)
        return PlaceOrderResponse(
            id=order.id,
            order_number=format_order_number(order.id),
            total=float(order.total),
            status=order.status,
            payment_status=order.payment_status,
        )
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"下单失败: {str(e)}")
        # 未知异常统一抛 500
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "",
    response_model=List[AdminOrderSummary],
    summary="后台订单列表",
)
async def list_orders(
    admin: Identity = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    """最近 200 条订单（含商品件数）"""
    try:
        return [
            AdminOrderSummary(
                id=order.id,
                order_number=format_order_number(order.id),
                customer=order.customer_name,
                email=order.email,
                phone=order.phone,
                items=quantity,
                total=float(order.total or 0),
                status=order.status,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                date=order.created_at,
            )
            for order, quantity in service.list_orders()
        ]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询订单列表失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/{order_id}",
    response_model=OrderDetail,
    summary="后台订单详情",
)
async def get_order(
    order_id: str = Path(..., description="订单ID"),
    admin: Identity = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    try:
        return OrderDetail.from_order(service.get_order(_parse_order_id(order_id)))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询订单详情失败: order_id={order_id}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch(
    "/{order_id}",
    status_code=204,
    response_class=Response,
    summary="修改订单状态",
    description="""后台修改订单状态和/或支付状态，不重算金额。""",
)
async def update_order(
    request: Request,
    order_id: str = Path(..., description="订单ID"),
    admin: Identity = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    try:
        payload = UpdateOrderRequest.model_validate(await read_json_body(request))
        service.update_status(
            _parse_order_id(order_id),
            status=payload.status,
            payment_status=payload.payment_status,
        )
        return Response(status_code=204)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"修改订单状态失败: order_id={order_id}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@me_router.get(
    "",
    response_model=List[CustomerOrderSummary],
    summary="我的订单列表",
)
async def list_my_orders(
    customer: Identity = Depends(get_current_customer),
    service: OrderService = Depends(get_order_service)
):
    try:
        return [
            CustomerOrderSummary.from_order(order)
            for order in service.list_customer_orders(customer.id)
        ]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询我的订单失败: customer_id={customer.id}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@me_router.get(
    "/{order_number}",
    response_model=OrderDetail,
    summary="按订单号查询我的订单",
)
async def get_my_order(
    order_number: str = Path(..., description="订单号，如 ORD-000123"),
    customer: Identity = Depends(get_current_customer),
    service: OrderService = Depends(get_order_service)
):
    order_id = parse_order_number(order_number)
    if order_id is None:
        raise HTTPException(status_code=400, detail="Invalid order number")

    try:
        return OrderDetail.from_order(service.get_customer_order(customer.id, order_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询订单失败: order_number={order_number}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


def _parse_order_id(raw: str) -> int:
    try:
        order_id = int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid order id")
    if order_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid order id")
    return order_id
