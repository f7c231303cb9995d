from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Numeric,
    Boolean,
    JSON,
    TIMESTAMP,
    ForeignKey,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name = Column(
        String(255),
        nullable=False,
        comment="分类名称",
    )

    slug = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="分类 URL 标识",
    )

    image = Column(
        Text,
        nullable=True,
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    subsections = relationship(
        "CategorySubsection",
        back_populates="category",
        cascade="all, delete-orphan",
    )
    products = relationship("Product", back_populates="category")


class CategorySubsection(Base):
    __tablename__ = "category_subsections"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="所属分类ID",
    )

    name = Column(
        String(255),
        nullable=False,
    )

    slug = Column(
        String(255),
        nullable=False,
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    category = relationship("Category", back_populates="subsections")

    # 同一分类下 slug 唯一
    __table_args__ = (
        UniqueConstraint(
            "category_id",
            "slug",
            name="uq_category_subsection_slug",
        ),
    )


class Product(Base):
    __tablename__ = "products"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name = Column(
        String(255),
        nullable=False,
        comment="商品名称",
    )

    description = Column(
        Text,
        nullable=True,
    )

    price = Column(
        Numeric(10, 2),
        nullable=False,
        comment="当前售价（下单时以此为准）",
    )

    original_price = Column(
        Numeric(10, 2),
        nullable=True,
        comment="划线原价",
    )

    # 库存仅由后台维护，下单流程不扣减
    stock_count = Column(
        Integer,
        nullable=False,
        server_default="0",
    )

    in_stock = Column(
        Boolean,
        nullable=False,
        server_default="1",
    )

    category_id = Column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )

    subsection_id = Column(
        Integer,
        ForeignKey("category_subsections.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    images = Column(JSON, nullable=True)
    image_labels = Column(JSON, nullable=True)
    features = Column(JSON, nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    category = relationship("Category", back_populates="products")
    subsection = relationship("CategorySubsection")


Index(
    "idx_products_name",
    Product.name,
)
