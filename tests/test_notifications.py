from rfidcart.data import seed as seed_module
from rfidcart.data.models.product import ProductModel
from rfidcart.services.notification_service import NotificationService, broadcast_cart_state_task


def test_broadcast_task_runs_eagerly():
    result = broadcast_cart_state_task.delay(3, "item_scanned", {"aggregate_weight": "1.000"})

    assert result.get() == {"cart_id": 3, "event": "item_scanned", "status": "sent"}


def test_service_enqueues_task():
    NotificationService.cart_updated(3, "checked_out", transaction_id=7)


def test_seed_fills_empty_catalog_once(session_factory, db, monkeypatch):
    monkeypatch.setattr(seed_module, "SessionLocal", session_factory)

    seed_module.seed()
    seed_module.seed()

    assert db.query(ProductModel).count() == len(seed_module.DEMO_PRODUCTS)
