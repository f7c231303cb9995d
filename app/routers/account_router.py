"""客户 / 后台账户与会话路由"""

from fastapi import APIRouter, Depends, HTTPException, Response
import logging

from app.core.config import settings
from app.core.dependencies import get_account_service, get_current_customer
from app.core.security import Identity, sign_customer_token, sign_admin_token
from app.services.account_service import AccountService
from app.schemas.account import (
    SignupRequest,
    CustomerLoginRequest,
    AdminLoginRequest,
    PasswordResetRequest,
    PasswordResetConfirm,
    SignupResponse,
    CustomerProfile,
    CustomerSessionResponse,
    AdminProfile,
    AdminSessionResponse,
    OkResponse,
)
from tasks.account_tasks import send_password_reset_link

logger = logging.getLogger(__name__)

customer_router = APIRouter(prefix="/customer", tags=["客户账户"])
admin_router = APIRouter(prefix="/admin", tags=["后台账户"])


def _set_cookie(response: Response, name: str, token: str) -> None:
    response.set_cookie(
        key=name,
        value=token,
        max_age=settings.cookie_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        path="/",
    )


def _clear_cookie(response: Response, name: str) -> None:
    response.delete_cookie(key=name, path="/")


# ==================== 客户 ====================

@customer_router.post("/signup", response_model=SignupResponse, summary="客户注册")
async def signup(
    request: SignupRequest,
    response: Response,
    service: AccountService = Depends(get_account_service)
):
    try:
        customer = service.signup(request.full_name, request.email, request.password)
        _set_cookie(
            response,
            settings.CUSTOMER_COOKIE,
            sign_customer_token(customer.id, customer.email, customer.full_name)
        )
        return SignupResponse(id=customer.id, email=customer.email, full_name=customer.full_name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"客户注册失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@customer_router.post("/login", response_model=CustomerSessionResponse, summary="客户登录")
async def customer_login(
    request: CustomerLoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service)
):
    customer = service.authenticate_customer(request.email, request.password)
    _set_cookie(
        response,
        settings.CUSTOMER_COOKIE,
        sign_customer_token(customer.id, customer.email, customer.full_name)
    )
    return CustomerSessionResponse(
        user=CustomerProfile(id=customer.id, name=customer.full_name, email=customer.email)
    )


@customer_router.post("/logout", response_model=OkResponse, summary="客户退出")
async def customer_logout(response: Response):
    _clear_cookie(response, settings.CUSTOMER_COOKIE)
    return OkResponse()


@customer_router.get("/me", response_model=CustomerSessionResponse, summary="当前客户")
async def customer_me(customer: Identity = Depends(get_current_customer)):
    return CustomerSessionResponse(
        user=CustomerProfile(id=customer.id, name=customer.name, email=customer.email)
    )


@customer_router.post("/reset-request", response_model=OkResponse, summary="申请重置密码")
async def reset_request(
    request: PasswordResetRequest,
    service: AccountService = Depends(get_account_service)
):
    """无论邮箱是否存在都返回 ok，重置链接交给异步任务投递"""
    try:
        issued = service.request_password_reset(request.email)
        if issued:
            customer, token = issued
            reset_url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/reset-password?token={token}"
            send_password_reset_link.delay(customer.email, reset_url)
        return OkResponse()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"申请重置密码失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@customer_router.post("/reset", response_model=OkResponse, summary="重置密码")
async def reset_password(
    request: PasswordResetConfirm,
    service: AccountService = Depends(get_account_service)
):
    try:
        service.reset_password(request.token, request.password)
        return OkResponse()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"重置密码失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


# ==================== 后台 ====================

@admin_router.post("/login", response_model=AdminSessionResponse, summary="后台登录")
async def admin_login(
    request: AdminLoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service)
):
    user = service.authenticate_admin(request.username, request.password)
    _set_cookie(
        response,
        settings.ADMIN_COOKIE,
        sign_admin_token(user.id, user.username, user.role)
    )
    # 同一浏览器不同时保留客户会话
    _clear_cookie(response, settings.CUSTOMER_COOKIE)
    return AdminSessionResponse(
        user=AdminProfile(id=user.id, username=user.username, role=user.role)
    )


@admin_router.post("/logout", response_model=OkResponse, summary="后台退出")
async def admin_logout(response: Response):
    _clear_cookie(response, settings.ADMIN_COOKIE)
    return OkResponse()
