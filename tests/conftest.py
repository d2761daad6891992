import itertools
import os
from decimal import Decimal

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

import fakeredis  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from rfidcart.data.database import build_engine, init_db  # noqa: E402
from rfidcart.data.models.product import ProductModel  # noqa: E402
from rfidcart.services.cart_engine import CartEngine  # noqa: E402
from rfidcart.services.cart_service import CartService  # noqa: E402
from rfidcart.services.lock_service import LockService  # noqa: E402
from tests.helpers import RecordingNotifier  # noqa: E402


@pytest.fixture()
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'cart.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def redis_client():
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture()
def lock_service(redis_client):
    return LockService(client=redis_client, ttl=10, wait_timeout=5, poll_interval=0.01)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def cart_engine(db, lock_service, notifier):
    return CartEngine(
        db,
        lock_service,
        notifier=notifier,
        deactivate_attempts=3,
        deactivate_max_wait=0,
    )


@pytest.fixture()
def cart_service(db, lock_service):
    return CartService(db, lock_service)


@pytest.fixture()
def make_product(db):
    tags = itertools.count(1)

    def _make(name="Apple", price="10.00", weight="0.500", stock=5):
        product = ProductModel(
            name=name,
            rfid_tag=f"TAG-{next(tags):04d}",
            unit_price=Decimal(price),
            unit_weight=Decimal(weight),
            stock_count=stock,
        )
        db.add(product)
        db.commit()
        return product.id

    return _make


@pytest.fixture()
def new_cart(cart_service):
    def _new():
        return cart_service.create_cart()["cart_id"]

    return _new
