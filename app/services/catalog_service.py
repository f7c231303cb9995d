"""商品目录只读服务（带 Redis 缓存）"""

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
import json
import logging
from redis import Redis, RedisError

from app.core.config import settings
from app.models.product import Category, CategorySubsection, Product

logger = logging.getLogger(__name__)


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


def serialize_product(product: Product) -> dict:
    category = product.category
    subsection = product.subsection
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": _money(product.price),
        "original_price": _money(product.original_price),
        "stock_count": product.stock_count,
        "in_stock": product.in_stock,
        "category_id": product.category_id,
        "subsection_id": product.subsection_id,
        "category_name": category.name if category else None,
        "category_slug": category.slug if category else None,
        "subsection_name": subsection.name if subsection else None,
        "subsection_slug": subsection.slug if subsection else None,
        "images": product.images or [],
        "image_labels": product.image_labels or [],
        "features": product.features or [],
        "created_at": product.created_at.isoformat() if product.created_at else None,
    }


class CatalogService:
    """商品目录服务类

    仅用于前台展示；下单定价直接读库，不经过这里的缓存。
    """

    def __init__(self, db: Session, redis: Redis = None):
        self.db = db
        self.redis = redis

    def _cache_get(self, cache_key: str):
        if not self.redis:
            return None
        try:
            cached = self.redis.get(cache_key)
        except RedisError as e:
            logger.warning(f"Redis 读取失败，直接查库: key={cache_key}, error={e}")
            return None
        if cached is None:
            return None
        logger.debug(f"Cache hit: {cache_key}")
        return json.loads(cached)

    def _cache_set(self, cache_key: str, value) -> None:
        if not self.redis:
            return
        try:
            self.redis.setex(cache_key, settings.CACHE_TTL_SECONDS, json.dumps(value))
        except RedisError as e:
            logger.warning(f"Redis 写入失败，跳过缓存: key={cache_key}, error={e}")
            return
        logger.debug(f"Cache set: {cache_key}")

    def _product_query(self):
        return select(Product).options(
            selectinload(Product.category),
            selectinload(Product.subsection),
        )

    def list_products(self, category_slug: Optional[str] = None) -> List[dict]:
        """商品列表（新 -> 旧），可按分类 slug 过滤"""
        cache_key = f"catalog:products:{category_slug or 'all'}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        stmt = self._product_query().order_by(Product.created_at.desc(), Product.id.desc())
        if category_slug:
            stmt = stmt.join(Category, Product.category_id == Category.id).where(
                Category.slug == category_slug
            )
        products = self.db.execute(stmt).scalars().all()

        payload = [serialize_product(p) for p in products]
        self._cache_set(cache_key, payload)
        return payload

    def get_product(self, product_id: int) -> dict:
        cache_key = f"catalog:product:{product_id}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        product = self.db.execute(
            self._product_query().where(Product.id == product_id)
        ).scalar_one_or_none()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        payload = serialize_product(product)
        self._cache_set(cache_key, payload)
        return payload

    def list_categories(self) -> List[dict]:
        """分类列表（含商品数量）"""
        cache_key = "catalog:categories"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        rows = self.db.execute(
            select(Category, func.count(Product.id))
            .outerjoin(Product, Product.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name.asc())
        ).all()

        payload = [
            {
                "id": category.id,
                "name": category.name,
                "slug": category.slug,
                "image": category.image,
                "created_at": category.created_at.isoformat() if category.created_at else None,
                "product_count": count,
            }
            for category, count in rows
        ]
        self._cache_set(cache_key, payload)
        return payload

    def list_subsections(self, category_id: int) -> List[dict]:
        category = self.db.get(Category, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")

        subsections = self.db.execute(
            select(CategorySubsection)
            .where(CategorySubsection.category_id == category_id)
            .order_by(CategorySubsection.name.asc())
        ).scalars().all()

        return [
            {
                "id": s.id,
                "category_id": s.category_id,
                "name": s.name,
                "slug": s.slug,
            }
            for s in subsections
        ]
