"""依赖注入配置模块"""

from typing import Optional

from fastapi import Depends, HTTPException, Request

# 数据库会话依赖
from app.db.session import SessionLocal
from sqlalchemy.orm import Session

# Redis 依赖
from app.core.redis import redis_client

from app.core.config import settings
from app.core.security import Identity, decode_token, CUSTOMER_ROLE, ADMIN_ROLE
from app.services.order_service import OrderService
from app.services.catalog_service import CatalogService
from app.services.account_service import AccountService
from app.services.contact_service import ContactService


def get_redis():
    """获取同步 Redis 客户端（连接失败由 CatalogService 降级处理）"""
    return redis_client


def get_db() -> Session:
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """获取订单服务实例（依赖注入）"""
    return OrderService(db=db)


def get_catalog_service(
    db: Session = Depends(get_db),
    redis = Depends(get_redis)
) -> CatalogService:
    """获取商品目录服务实例（依赖注入）"""
    return CatalogService(db=db, redis=redis)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db=db)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db=db)


# ==================== 身份解析 ====================

def get_optional_customer(request: Request) -> Optional[Identity]:
    identity = decode_token(request.cookies.get(settings.CUSTOMER_COOKIE))
    if identity and identity.role == CUSTOMER_ROLE:
        return identity
    return None


def get_current_customer(
    identity: Optional[Identity] = Depends(get_optional_customer)
) -> Identity:
    """要求已登录客户，否则 401（在请求体校验之前执行）"""
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


def get_current_admin(request: Request) -> Identity:
    """要求后台管理员，否则 401"""
    identity = decode_token(request.cookies.get(settings.ADMIN_COOKIE))
    if identity is None or identity.role != ADMIN_ROLE:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


# 常用的依赖注入别名
DatabaseDep = Depends(get_db)
RedisDep = Depends(get_redis)
OrderServiceDep = Depends(get_order_service)
CatalogServiceDep = Depends(get_catalog_service)
AccountServiceDep = Depends(get_account_service)
ContactServiceDep = Depends(get_contact_service)
CurrentCustomerDep = Depends(get_current_customer)
CurrentAdminDep = Depends(get_current_admin)
