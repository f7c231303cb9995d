"""联系留言路由"""

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from typing import List
import logging

from app.core.dependencies import get_contact_service, get_current_admin
from app.core.security import Identity
from app.services.contact_service import ContactService
from app.schemas.base import ErrorResponse
from app.schemas.contact import (
    ContactMessageCreate,
    ContactMessageCreated,
    ContactMessageSchema,
    ContactMessageStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/contact",
    tags=["联系留言"],
    responses={
        400: {"model": ErrorResponse, "description": "请求参数错误"},
        401: {"model": ErrorResponse, "description": "未登录或无权限"},
        404: {"model": ErrorResponse, "description": "留言不存在"},
    }
)


@router.post("", response_model=ContactMessageCreated, status_code=201, summary="提交留言")
async def create_message(
    request: ContactMessageCreate,
    service: ContactService = Depends(get_contact_service)
):
    try:
        message = service.create_message(request)
        return ContactMessageCreated(id=message.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"提交留言失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("", response_model=List[ContactMessageSchema], summary="后台留言列表")
async def list_messages(
    admin: Identity = Depends(get_current_admin),
    service: ContactService = Depends(get_contact_service)
):
    return service.list_messages()


@router.patch(
    "/{message_id}",
    status_code=204,
    response_class=Response,
    summary="修改留言状态",
)
async def update_message_status(
    request: ContactMessageStatusUpdate,
    message_id: int = Path(..., gt=0, description="留言ID"),
    admin: Identity = Depends(get_current_admin),
    service: ContactService = Depends(get_contact_service)
):
    try:
        service.update_status(message_id, request.status)
        return Response(status_code=204)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"修改留言状态失败: message_id={message_id}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
