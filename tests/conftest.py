"""测试配置和 fixtures"""
import os

# 测试环境下降低 bcrypt 成本，必须在导入 app 之前设置
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from decimal import Decimal
from unittest.mock import Mock
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from redis import Redis

from app.db.base import Base
import app.models  # noqa: F401
from app.models.product import Category, CategorySubsection, Product
from app.models.customer import Customer, AdminUser
from app.core.config import settings
from app.core.dependencies import get_db, get_redis
from app.core.security import hash_password, sign_customer_token, sign_admin_token
from app.main import app as fastapi_app


@pytest.fixture
def engine():
    """SQLite 内存库（单连接共享，开启外键约束）"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """创建测试数据库会话"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mock_redis():
    """创建模拟 Redis 客户端"""
    redis_mock = Mock(spec=Redis)
    redis_mock.get.return_value = None
    redis_mock.setex.return_value = True
    redis_mock.delete.return_value = 1
    return redis_mock


@pytest.fixture
def catalog(db_session):
    """示例目录数据：一个分类、一个子分类、两个商品"""
    category = Category(name="厨房用品", slug="kitchen")
    db_session.add(category)
    db_session.flush()

    subsection = CategorySubsection(category_id=category.id, name="刀具", slug="knives")
    db_session.add(subsection)
    db_session.flush()

    knife = Product(
        name="主厨刀",
        description="20cm 不锈钢",
        price=Decimal("10.00"),
        original_price=Decimal("12.00"),
        stock_count=5,
        category_id=category.id,
        subsection_id=subsection.id,
        images=["knife.jpg"],
        features=["不锈钢"],
    )
    board = Product(
        name="砧板",
        price=Decimal("2.50"),
        category_id=category.id,
    )
    db_session.add_all([knife, board])
    db_session.commit()

    return {
        "category": category,
        "subsection": subsection,
        "knife": knife,
        "board": board,
    }


@pytest.fixture
def customer(db_session):
    """示例客户（密码 secret123）"""
    customer = Customer(
        full_name="Ada Lovelace",
        email="ada@example.com",
        password_hash=hash_password("secret123"),
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture
def other_customer(db_session):
    customer = Customer(
        full_name="Grace Hopper",
        email="grace@example.com",
        password_hash=hash_password("secret456"),
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture
def admin_user(db_session):
    """示例后台账户（密码 admin-pass）"""
    user = AdminUser(
        username="admin",
        password_hash=hash_password("admin-pass"),
        role="admin",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def sample_order_payload(catalog):
    """示例下单请求体（客户端价格字段会被忽略）"""
    return {
        "customer": {
            "fullName": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "555-0100",
            "street": "1 Analytical Way",
            "city": "London",
            "region": "Greater London",
        },
        "paymentMethod": "card",
        "shipping": 5,
        "tax": "1.25",
        "items": [
            {"productId": catalog["knife"].id, "quantity": 2, "price": 0.01},
            {"productId": catalog["board"].id, "quantity": 3},
        ],
    }


@pytest.fixture
def client(db_session):
    """TestClient，数据库替换为测试会话，Redis 视为不可用"""
    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_redis] = lambda: None

    # 不进入 lifespan，避免连接真实数据库
    test_client = TestClient(fastapi_app)
    try:
        yield test_client
    finally:
        fastapi_app.dependency_overrides.clear()


def login_customer(client, customer):
    """给 client 写入客户会话 Cookie"""
    client.cookies.set(
        settings.CUSTOMER_COOKIE,
        sign_customer_token(customer.id, customer.email, customer.full_name)
    )


def login_admin(client, user):
    """给 client 写入后台会话 Cookie"""
    client.cookies.set(
        settings.ADMIN_COOKIE,
        sign_admin_token(user.id, user.username, user.role)
    )
