from .base import Base
from .session import engine


def init_db():
    """按模型元数据建表（开发环境 / 首次部署）"""
    # 导入模型以注册到 Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# Export for convenience
__all__ = ["Base", "engine", "init_db"]
