"""账户服务：注册、登录、密码重置"""

from fastapi import HTTPException
from sqlalchemy import select, delete, func, or_
from sqlalchemy.orm import Session
from typing import Optional, Tuple
from datetime import datetime, timedelta, timezone
import logging

from app.core.config import settings
from app.core.security import (
    hash_password,
    verify_password,
    generate_reset_token,
    hash_reset_token,
    ADMIN_ROLE,
)
from app.models.customer import Customer, AdminUser, PasswordReset

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountService:
    """客户与后台账户服务类"""

    def __init__(self, db: Session):
        self.db = db

    # ==================== 客户 ====================

    def signup(self, full_name: Optional[str], email: Optional[str], password: Optional[str]) -> Customer:
        if not full_name or not email or not password:
            raise HTTPException(
                status_code=400,
                detail="Full name, email, and password are required"
            )

        email = email.lower()
        existing = self.db.execute(
            select(Customer).where(Customer.email == email)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=409, detail="Email already in use")

        try:
            customer = Customer(
                full_name=full_name,
                email=email,
                password_hash=hash_password(password),
            )
            self.db.add(customer)
            self.db.commit()
            logger.info(f"客户注册成功: customer_id={customer.id}")
            return customer
        except Exception as e:
            self.db.rollback()
            logger.error(f"客户注册失败: {str(e)}")
            raise

    def authenticate_customer(self, email: Optional[str], password: Optional[str]) -> Customer:
        if not email or not password:
            raise HTTPException(status_code=400, detail="Email and password are required")

        customer = self.db.execute(
            select(Customer).where(Customer.email == email.lower())
        ).scalar_one_or_none()

        if not customer or not verify_password(password, customer.password_hash):
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return customer

    # ==================== 后台管理员 ====================

    def authenticate_admin(self, username: Optional[str], password: Optional[str]) -> AdminUser:
        if not username or not password:
            raise HTTPException(status_code=400, detail="Username and password are required")

        user = self.db.execute(
            select(AdminUser).where(AdminUser.username == username)
        ).scalar_one_or_none()

        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"后台登录失败: username={username}")
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return user

    def upsert_admin(self, username: str, password: str, role: str = ADMIN_ROLE) -> Tuple[AdminUser, bool]:
        """创建或更新后台账户，返回 (账户, 是否新建)"""
        try:
            user = self.db.execute(
                select(AdminUser).where(AdminUser.username == username)
            ).scalar_one_or_none()

            created = user is None
            if created:
                user = AdminUser(username=username, role=role)
                self.db.add(user)

            user.password_hash = hash_password(password)
            user.role = role
            self.db.commit()
            logger.info(f"后台账户已{'创建' if created else '更新'}: username={username}, role={role}")
            return user, created
        except Exception as e:
            self.db.rollback()
            logger.error(f"后台账户写入失败: {str(e)}")
            raise

    # ==================== 密码重置 ====================

    def request_password_reset(self, email: Optional[str]) -> Optional[Tuple[Customer, str]]:
        """生成重置令牌，邮箱不存在时返回 None（不暴露账户是否存在）"""
        if not email:
            raise HTTPException(status_code=400, detail="Email is required")

        customer = self.db.execute(
            select(Customer).where(Customer.email == email.lower())
        ).scalar_one_or_none()
        if not customer:
            return None

        token = generate_reset_token()
        try:
            self.db.add(PasswordReset(
                customer_id=customer.id,
                token_hash=hash_reset_token(token),
                expires_at=_utcnow() + timedelta(minutes=settings.PASSWORD_RESET_TTL_MINUTES),
            ))
            self.db.commit()
            logger.info(f"已生成密码重置令牌: customer_id={customer.id}")
            return customer, token
        except Exception as e:
            self.db.rollback()
            logger.error(f"生成密码重置令牌失败: {str(e)}")
            raise

    def reset_password(self, token: Optional[str], password: Optional[str]) -> None:
        if not token or not password:
            raise HTTPException(status_code=400, detail="Token and new password are required")

        try:
            reset = self.db.execute(
                select(PasswordReset)
                .where(
                    PasswordReset.token_hash == hash_reset_token(token),
                    PasswordReset.used_at.is_(None),
                    PasswordReset.expires_at > _utcnow()
                )
                .with_for_update()
            ).scalar_one_or_none()

            if not reset:
                raise HTTPException(status_code=400, detail="Invalid or expired token")

            customer = self.db.get(Customer, reset.customer_id)
            customer.password_hash = hash_password(password)
            reset.used_at = _utcnow()

            self.db.commit()
            logger.info(f"密码重置成功: customer_id={reset.customer_id}")
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"密码重置失败: {str(e)}")
            raise

    def cleanup_expired_resets(self, batch_size: int = 500) -> int:
        """分批删除已使用或已过期的重置令牌

        Args:
            batch_size: 批处理大小，默认500条

        Returns:
            删除的记录数量
        """
        total_cleaned = 0

        while True:
            try:
                # skip_locked 防止多 worker 重复处理
                stale_ids = self.db.execute(
                    select(PasswordReset.id)
                    .where(
                        or_(
                            PasswordReset.used_at.is_not(None),
                            PasswordReset.expires_at <= _utcnow()
                        )
                    )
                    .limit(batch_size)
                    .with_for_update(skip_locked=True)
                ).scalars().all()

                if not stale_ids:
                    break

                self.db.execute(
                    delete(PasswordReset).where(PasswordReset.id.in_(stale_ids))
                )
                self.db.commit()

                total_cleaned += len(stale_ids)
                logger.info(f"已完成批次清理，累计清理 {total_cleaned} 条重置令牌")

                if len(stale_ids) < batch_size:
                    break

            except Exception as e:
                logger.error(f"批处理清理过程中发生错误: {str(e)}")
                self.db.rollback()
                raise

        logger.info(f"清理任务完成，总共清理 {total_cleaned} 条重置令牌")
        return total_cleaned

    def count_stale_resets(self) -> int:
        """统计待清理的重置令牌数量（试运行用）"""
        return self.db.execute(
            select(func.count(PasswordReset.id))
            .where(
                or_(
                    PasswordReset.used_at.is_not(None),
                    PasswordReset.expires_at <= _utcnow()
                )
            )
        ).scalar_one()
