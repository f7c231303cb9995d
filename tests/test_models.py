"""模型单元测试"""
import pytest
from decimal import Decimal
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from app.models.product import Category, CategorySubsection, Product
from app.models.order import Order, OrderItem
from app.models.customer import Customer, PasswordReset


def _order(**overrides):
    values = dict(
        customer_name="Ada",
        email="ada@example.com",
        phone="555",
        street="1 Way",
        city="London",
        payment_method="card",
        subtotal=Decimal("10.00"),
        shipping=Decimal("0.00"),
        tax=Decimal("0.00"),
        total=Decimal("10.00"),
    )
    values.update(overrides)
    return Order(**values)


class TestModels:
    """数据模型测试类"""

    def test_product_defaults(self, db_session):
        """测试商品模型默认值"""
        product = Product(name="测试商品", price=Decimal("9.99"))
        db_session.add(product)
        db_session.commit()
        db_session.expire_all()

        saved = db_session.execute(select(Product)).scalar_one()
        assert saved.id is not None
        assert saved.price == Decimal("9.99")
        assert saved.stock_count == 0
        assert saved.in_stock is True
        assert saved.created_at is not None

    def test_subsection_slug_unique_per_category(self, db_session):
        category = Category(name="厨房", slug="kitchen")
        db_session.add(category)
        db_session.flush()

        db_session.add_all([
            CategorySubsection(category_id=category.id, name="刀具", slug="knives"),
            CategorySubsection(category_id=category.id, name="刀具2", slug="knives"),
        ])
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_order_defaults(self, db_session):
        order = _order()
        db_session.add(order)
        db_session.commit()
        db_session.expire_all()

        saved = db_session.get(Order, order.id)
        assert saved.status == "pending"
        assert saved.payment_status == "pending"
        assert saved.customer_id is None
        assert saved.region is None

    def test_order_item_quantity_must_be_positive(self, db_session):
        product = Product(name="测试商品", price=Decimal("1.00"))
        db_session.add(product)
        db_session.flush()

        db_session.add(_order(items=[OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=0,
            unit_price=Decimal("1.00"),
            line_total=Decimal("0.00"),
        )]))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_order_total_must_not_be_negative(self, db_session):
        db_session.add(_order(total=Decimal("-1.00")))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_deleting_order_removes_items(self, db_session):
        """删除订单级联删除明细"""
        product = Product(name="测试商品", price=Decimal("5.00"))
        db_session.add(product)
        db_session.flush()

        order = _order(items=[
            OrderItem(
                product_id=product.id,
                product_name=product.name,
                quantity=2,
                unit_price=Decimal("5.00"),
                line_total=Decimal("10.00"),
            )
        ])
        db_session.add(order)
        db_session.commit()

        db_session.delete(order)
        db_session.commit()

        assert db_session.execute(select(func.count(OrderItem.id))).scalar_one() == 0

    def test_deleting_customer_removes_password_resets(self, db_session):
        customer = Customer(full_name="Ada", email="ada@example.com", password_hash="x")
        db_session.add(customer)
        db_session.flush()
        db_session.add(PasswordReset(
            customer_id=customer.id,
            token_hash="abc",
            expires_at=func.now(),
        ))
        db_session.commit()

        db_session.delete(customer)
        db_session.commit()

        assert db_session.execute(select(func.count(PasswordReset.id))).scalar_one() == 0

    def test_customer_email_unique(self, db_session):
        db_session.add_all([
            Customer(full_name="A", email="same@example.com", password_hash="x"),
            Customer(full_name="B", email="same@example.com", password_hash="y"),
        ])
        with pytest.raises(IntegrityError):
            db_session.commit()
