import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from rfidcart.data.models.cart_line import CartLineModel
from rfidcart.data.models.transaction import TransactionModel
from rfidcart.domain.errors import CartInactive, OutOfStock
from rfidcart.services.cart_engine import CartEngine
from tests.helpers import RecordingNotifier, stock_of


def _run_concurrently(session_factory, lock_service, calls):
    """
    Odpala wywolania silnika rownolegle, kazde z wlasna sesja.
    calls: lista (nazwa_metody, args); zwraca wynik albo nazwe wyjatku.
    """
    barrier = threading.Barrier(len(calls))

    def worker(method, args):
        db = session_factory()
        try:
            engine = CartEngine(db, lock_service, notifier=RecordingNotifier())
            barrier.wait()
            try:
                return getattr(engine, method)(*args)
            except (OutOfStock, CartInactive) as e:
                return type(e).__name__
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(worker, method, args) for method, args in calls]
        return [f.result() for f in futures]


def test_last_unit_is_sold_once(session_factory, lock_service, db, make_product, new_cart):
    product_id = make_product(stock=1)
    first, second = new_cart(), new_cart()

    results = _run_concurrently(
        session_factory,
        lock_service,
        [("process_scan", (first, product_id)), ("process_scan", (second, product_id))],
    )

    assert sum(isinstance(r, dict) for r in results) == 1
    assert results.count("OutOfStock") == 1
    assert stock_of(db, product_id) == 0
    assert db.query(CartLineModel).count() == 1


def test_many_carts_race_for_limited_stock(session_factory, lock_service, db, make_product, new_cart):
    product_id = make_product(stock=6)
    carts = [new_cart() for _ in range(3)]
    calls = [("process_scan", (carts[i % 3], product_id)) for i in range(10)]

    results = _run_concurrently(session_factory, lock_service, calls)

    assert sum(isinstance(r, dict) for r in results) == 6
    assert results.count("OutOfStock") == 4
    assert stock_of(db, product_id) == 0
    db.expire_all()
    assert sum(line.quantity for line in db.query(CartLineModel).all()) == 6


def test_concurrent_scans_into_one_cart_lose_nothing(session_factory, lock_service, db, make_product, new_cart):
    apple = make_product(weight="0.500", stock=20)
    milk = make_product(weight="1.000", stock=20)
    cart_id = new_cart()
    calls = [("process_scan", (cart_id, apple if i % 2 else milk)) for i in range(8)]

    results = _run_concurrently(session_factory, lock_service, calls)

    assert all(isinstance(r, dict) for r in results)
    db.expire_all()
    lines = {line.product_id: line for line in db.query(CartLineModel).all()}
    assert lines[apple].quantity == 4
    assert lines[milk].quantity == 4
    assert stock_of(db, apple) == 16
    assert stock_of(db, milk) == 16
    final_weight = max(r["aggregate_weight"] for r in results)
    assert final_weight == Decimal("6.000")


def test_checkout_and_scan_do_not_interleave(session_factory, lock_service, db, make_product, new_cart):
    product_id = make_product(price="10.00", stock=5)
    cart_id = new_cart()
    CartEngine(db, lock_service, notifier=RecordingNotifier()).process_scan(cart_id, product_id)

    scan, transaction = _run_concurrently(
        session_factory,
        lock_service,
        [("process_scan", (cart_id, product_id)), ("checkout", (cart_id, None, "card"))],
    )

    db.expire_all()
    if scan == "CartInactive":
        assert transaction["total_amount"] == Decimal("10.00")
        assert stock_of(db, product_id) == 4
    else:
        assert scan["line_quantity"] == 2
        assert transaction["total_amount"] == Decimal("20.00")
        assert stock_of(db, product_id) == 3
    assert db.query(TransactionModel).count() == 1
