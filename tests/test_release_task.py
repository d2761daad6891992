from datetime import datetime, timedelta, timezone

from rfidcart.data.models.cart import CartModel
from rfidcart.tasks.release import release_abandoned_carts
from tests.helpers import stock_of


def _age(db, cart_id, seconds):
    cart = db.get(CartModel, cart_id)
    cart.updated_at = datetime.now(timezone.utc) - timedelta(seconds=seconds)
    db.commit()


def test_idle_cart_is_released(db, lock_service, cart_engine, make_product, new_cart):
    product_id = make_product(stock=5)
    idle = new_cart()
    busy = new_cart()
    cart_engine.process_scan(idle, product_id)
    cart_engine.process_scan(idle, product_id)
    cart_engine.process_scan(busy, product_id)
    _age(db, idle, 3600)

    released = release_abandoned_carts(db, lock_service, idle_seconds=600)

    assert released == [idle]
    db.expire_all()
    assert db.get(CartModel, idle).status == "inactive"
    assert db.get(CartModel, busy).status == "active"
    assert stock_of(db, product_id) == 4


def test_empty_or_inactive_carts_are_skipped(db, lock_service, cart_engine, make_product, new_cart):
    product_id = make_product(stock=5)
    empty = new_cart()
    sold = new_cart()
    cart_engine.process_scan(sold, product_id)
    cart_engine.checkout(sold, payment_method="card")
    _age(db, empty, 3600)
    _age(db, sold, 3600)

    assert release_abandoned_carts(db, lock_service, idle_seconds=600) == []
    assert stock_of(db, product_id) == 4


def test_cart_touched_after_selection_is_kept(db, cart_engine, make_product, new_cart):
    product_id = make_product(stock=5)
    cart_id = new_cart()
    cart_engine.process_scan(cart_id, product_id)

    cutoff = datetime.now(timezone.utc) - timedelta(seconds=600)
    result = cart_engine.release_cart(cart_id, idle_before=cutoff)

    assert result["released"] is False
    db.expire_all()
    assert db.get(CartModel, cart_id).status == "active"
    assert stock_of(db, product_id) == 4
