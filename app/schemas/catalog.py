from pydantic import BaseModel
from typing import List, Optional


class ProductSchema(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    stock_count: int = 0
    in_stock: bool = True
    category_id: Optional[int] = None
    subsection_id: Optional[int] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    subsection_name: Optional[str] = None
    subsection_slug: Optional[str] = None
    images: List[str] = []
    image_labels: List[str] = []
    features: List[str] = []
    created_at: Optional[str] = None


class CategorySchema(BaseModel):
    id: int
    name: str
    slug: str
    image: Optional[str] = None
    created_at: Optional[str] = None
    product_count: int = 0


class SubsectionSchema(BaseModel):
    id: int
    category_id: int
    name: str
    slug: str
