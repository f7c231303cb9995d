
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelSchema(BaseModel):
    """对外字段统一使用 camelCase，内部使用 snake_case"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True  # 支持从 ORM 对象直接生成 Schema


class ErrorResponse(BaseModel):
    """统一错误响应"""
    error: str
