"""账户相关的 Celery 任务"""

from celery_app import app
from app.db.session import SessionLocal
from app.services.account_service import AccountService
import logging

logger = logging.getLogger(__name__)


@app.task(name='tasks.account.send_password_reset_link')
def send_password_reset_link(email: str, reset_url: str):
    """投递密码重置链接

    目前没有接入邮件服务，链接只写入 worker 日志，由运维转交。

    Args:
        email: 客户邮箱
        reset_url: 带一次性令牌的重置链接
    """
    logger.info(f"密码重置链接: email={email}, url={reset_url}")
    return {"status": "queued", "email": email}


@app.task(name='tasks.account.cleanup_expired_password_resets')
def cleanup_expired_password_resets(batch_size: int = 500):
    """清理已使用或已过期的密码重置令牌

    Args:
        batch_size: 批处理大小，默认500条

    Returns:
        清理的记录数量描述
    """
    db = SessionLocal()
    try:
        service = AccountService(db)
        count = service.cleanup_expired_resets(batch_size)
        db.commit()
        result = f"成功清理 {count} 条过期重置令牌"
        logger.info(result)
        return result
    except Exception as e:
        logger.error(f"清理过期重置令牌任务执行失败: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


# 导出任务
__all__ = [
    'send_password_reset_link',
    'cleanup_expired_password_resets'
]
