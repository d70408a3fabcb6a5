import os
from decimal import Decimal

#konfiguracja przed importem aplikacji
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_MAX_REQUESTS"] = "3"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_rate_limiter
from app.celery_worker import celery_app
from app.data.database import Base, get_db
from app.data.models import CartItemModel, OrderModel, ProductModel, UserModel
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

celery_app.conf.task_always_eager = True


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session_factory():
    return TestingSessionLocal


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class Shop:
    """Dane testowe i odczyty prosto z bazy (z pominieciem identity map)."""

    def __init__(self, db):
        self.db = db

    def user(self, name="Jan", role="customer") -> UserModel:
        user = UserModel(name=name, email=f"{name.lower()}@test.local", role=role)
        self.db.add(user)
        self.db.commit()
        return user

    def product(self, name="A", price="10.00", stock=5) -> ProductModel:
        product = ProductModel(name=name, price=Decimal(price), stock=stock)
        self.db.add(product)
        self.db.commit()
        return product

    def cart_line(self, user_id, product_id, quantity) -> CartItemModel:
        #bez sprawdzania stanu, jak koszyk ktory zestarzal sie po zmianie stanow
        item = CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
        self.db.add(item)
        self.db.commit()
        return item

    def stock(self, product_id) -> int:
        return self.db.execute(select(ProductModel.stock).where(ProductModel.id == product_id)).scalar_one()

    def set_price(self, product_id, price) -> None:
        product = self.db.get(ProductModel, product_id)
        product.price = Decimal(price)
        self.db.commit()

    def set_status(self, order_id, status) -> None:
        order = self.db.get(OrderModel, order_id)
        order.status = status
        self.db.commit()

    def status(self, order_id) -> str:
        return self.db.execute(select(OrderModel.status).where(OrderModel.id == order_id)).scalar_one()

    def count(self, model) -> int:
        return self.db.execute(select(func.count()).select_from(model)).scalar_one()

    def cart_quantities(self, user_id) -> dict:
        rows = self.db.execute(
            select(CartItemModel.product_id, CartItemModel.quantity).where(CartItemModel.user_id == user_id)
        ).all()
        return {product_id: quantity for product_id, quantity in rows}

    @staticmethod
    def headers(user) -> dict:
        return {"X-User-Id": str(user.id)}


@pytest.fixture()
def shop(db):
    return Shop(db)
