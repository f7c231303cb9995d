"""商品目录只读路由"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from typing import List, Optional
import logging

from app.core.dependencies import get_catalog_service
from app.services.catalog_service import CatalogService
from app.schemas.base import ErrorResponse
from app.schemas.catalog import ProductSchema, CategorySchema, SubsectionSchema

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["商品目录"],
    responses={
        400: {"model": ErrorResponse, "description": "请求参数错误"},
        404: {"model": ErrorResponse, "description": "资源未找到"},
        500: {"model": ErrorResponse, "description": "服务器内部错误"}
    }
)


@router.get(
    "/products",
    response_model=List[ProductSchema],
    summary="商品列表",
    description="""商品列表（新 -> 旧）。

    **缓存策略：**
    - 首先查询Redis缓存
    - 缓存未命中则查询数据库
    - Redis 不可用时直接查库
    """,
)
async def list_products(
    category: Optional[str] = Query(None, description="分类 slug"),
    service: CatalogService = Depends(get_catalog_service)
):
    try:
        return service.list_products(category)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询商品列表失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/products/{product_id}", response_model=ProductSchema, summary="商品详情")
async def get_product(
    product_id: int = Path(..., gt=0, description="商品ID"),
    service: CatalogService = Depends(get_catalog_service)
):
    try:
        return service.get_product(product_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询商品失败: product_id={product_id}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories", response_model=List[CategorySchema], summary="分类列表")
async def list_categories(service: CatalogService = Depends(get_catalog_service)):
    try:
        return service.list_categories()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询分类失败: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/categories/{category_id}/subsections",
    response_model=List[SubsectionSchema],
    summary="分类下的子分类",
)
async def list_subsections(
    category_id: int = Path(..., gt=0, description="分类ID"),
    service: CatalogService = Depends(get_catalog_service)
):
    try:
        return service.list_subsections(category_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询子分类失败: category_id={category_id}, error={str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
