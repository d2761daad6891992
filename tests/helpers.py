from rfidcart.data.models.cart import CartModel
from rfidcart.data.models.cart_line import CartLineModel
from rfidcart.data.models.product import ProductModel
from rfidcart.data.models.transaction import TransactionModel


class RecordingNotifier:
    """Zbiera powiadomienia zamiast wysylac je przez Celery."""

    def __init__(self):
        self.events = []

    def cart_updated(self, cart_id, event, **payload):
        self.events.append((cart_id, event, payload))


class BrokenNotifier:
    def cart_updated(self, cart_id, event, **payload):
        raise ConnectionError("broker down")


def snapshot(db):
    """Pelny stan tabel do porownan przed/po nieudanej operacji."""
    db.expire_all()
    return (
        [(p.id, p.stock_count) for p in db.query(ProductModel).order_by(ProductModel.id)],
        [
            (c.id, c.status, c.aggregate_weight, c.updated_at)
            for c in db.query(CartModel).order_by(CartModel.id)
        ],
        [
            (l.id, l.cart_id, l.product_id, l.quantity, l.line_weight)
            for l in db.query(CartLineModel).order_by(CartLineModel.id)
        ],
        db.query(TransactionModel).count(),
    )


def stock_of(db, product_id):
    db.expire_all()
    return db.get(ProductModel, product_id).stock_count
