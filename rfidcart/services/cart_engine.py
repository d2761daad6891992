# rfidcart/services/cart_engine.py
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rfidcart.data.models.cart import CartModel
from rfidcart.data.models.cart_line import CartLineModel
from rfidcart.data.models.transaction import TransactionModel
from rfidcart.domain.enums import CartStatus, PaymentMethod, TransactionStatus
from rfidcart.domain.errors import (
    CartEngineError,
    CartInactive,
    CheckoutDegraded,
    EmptyCart,
    InvalidInput,
    NotFound,
    OutOfStock,
    StorageError,
)
from rfidcart.repos.cart_repo import CartRepo
from rfidcart.repos.catalog_repo import CatalogRepo
from rfidcart.repos.transaction_repo import TransactionRepo
from rfidcart.services.lock_service import LockService, cart_key, product_key
from rfidcart.services.notification_service import NotificationService
from rfidcart.utils.logging import get_logger
from rfidcart.utils.retry import db_retry
from rfidcart.utils.settings import DEACTIVATE_RETRY_ATTEMPTS, DEACTIVATE_RETRY_MAX_WAIT

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    #sqlite zwraca naive datetime
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def transaction_to_dict(transaction: TransactionModel) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "cart_id": transaction.cart_id,
        "email": transaction.email,
        "total_amount": transaction.total_amount,
        "total_weight": transaction.total_weight,
        "payment_method": transaction.payment_method,
        "status": transaction.status,
        "created_at": transaction.created_at,
    }


class CartEngine:
    """
    Jedyny zapisujacy pozycje koszyka, wage koszyka i stan magazynu.

    Kazda komenda:
    - bierze lock koszyka (redis), a dla zmian stanu magazynu dodatkowo lock produktu
    - robi cala zmiane w jednej transakcji bazy (commit albo rollback, nic pomiedzy)
    - po commicie powiadamia wyswietlacze
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notifier: NotificationService | None = None,
        deactivate_attempts: int = DEACTIVATE_RETRY_ATTEMPTS,
        deactivate_max_wait: float = DEACTIVATE_RETRY_MAX_WAIT,
    ):
        self.db = db
        self.carts = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.ledger = TransactionRepo(db)
        self.lock_service = lock_service
        self.notifier = notifier or NotificationService()
        self.deactivate_attempts = deactivate_attempts
        self.deactivate_max_wait = deactivate_max_wait

    @contextmanager
    def _unit_of_work(self, operation: str, cart_id: int):
        try:
            yield
        except CartEngineError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{operation} on cart {cart_id} failed: {e}")
            raise StorageError(f"{operation} failed, no changes were applied") from e

    def _load_cart(self, cart_id: int) -> CartModel:
        cart = self.carts.get_cart(cart_id, for_update=True)
        if not cart:
            raise NotFound(f"Cart {cart_id} not found")
        return cart

    def _load_active_cart(self, cart_id: int) -> CartModel:
        cart = self._load_cart(cart_id)
        if cart.status != CartStatus.ACTIVE.value:
            raise CartInactive(f"Cart {cart_id} is not active")
        return cart

    def _recompute_weight(self, cart: CartModel) -> Decimal:
        #pelne przeliczenie z aktualnych pozycji, nie delta
        lines = self.carts.get_cart_lines(cart.id)
        weight = sum((line.line_weight for line in lines), Decimal("0.000"))
        cart.aggregate_weight = weight
        return weight

    def _notify(self, cart_id: int, event: str, **payload):
        try:
            self.notifier.cart_updated(cart_id, event, **payload)
        except Exception as e:
            logger.warning(f"Failed to notify displays about cart {cart_id}: {e}")

    #commands
    def process_scan(self, cart_id: int, product_id: int) -> Dict[str, Any]:
        with self.lock_service.hold(cart_key(cart_id), product_key(product_id)):
            with self._unit_of_work("process_scan", cart_id):
                cart = self._load_active_cart(cart_id)

                product = self.catalog.get_product(product_id)
                if not product:
                    raise NotFound(f"Product {product_id} not found")
                if product.stock_count <= 0:
                    raise OutOfStock(f"Product {product_id} is out of stock")

                #drugie sprawdzenie w bazie, 0 rows affected = ktos zabral ostatnia sztuke
                if self.catalog.decrement_stock(product_id) == 0:
                    raise OutOfStock(f"Product {product_id} is out of stock")

                line = self.carts.get_cart_line(cart_id, product_id)
                if line:
                    line.quantity += 1
                    line.line_weight = line.quantity * product.unit_weight
                else:
                    line = self.carts.add_cart_line(
                        CartLineModel(
                            cart_id=cart_id,
                            product_id=product_id,
                            quantity=1,
                            line_weight=product.unit_weight,
                        )
                    )
                self.carts.flush()

                weight = self._recompute_weight(cart)
                cart.updated_at = _now()

                result = {
                    "cart_id": cart_id,
                    "line_id": line.id,
                    "line_quantity": line.quantity,
                    "line_weight": line.line_weight,
                    "product_name": product.name,
                    "aggregate_weight": weight,
                }
                self.carts.commit()

        logger.info(
            f"Scan: product {product_id} -> cart {cart_id}, "
            f"quantity {result['line_quantity']}, cart weight {weight}"
        )
        self._notify(cart_id, "item_scanned", product_id=product_id, aggregate_weight=str(weight))
        return result

    def checkout(
        self,
        cart_id: int,
        email: str | None = None,
        payment_method: str = PaymentMethod.CARD.value,
    ) -> Dict[str, Any]:
        with self.lock_service.hold(cart_key(cart_id)):
            with self._unit_of_work("checkout", cart_id):
                cart = self._load_active_cart(cart_id)

                rows = self.carts.get_cart_lines_with_products(cart_id)
                if not rows:
                    raise EmptyCart(f"Cart {cart_id} is empty")

                try:
                    method = PaymentMethod(payment_method)
                except ValueError:
                    raise InvalidInput(f"Unsupported payment method: {payment_method}")

                #ceny z aktualnego katalogu
                total_amount = sum(
                    (product.unit_price * line.quantity for line, product in rows),
                    Decimal("0.00"),
                )

                #najpierw zapis sprzedazy, deaktywacja dopiero potem
                transaction = self.ledger.create_transaction(
                    TransactionModel(
                        cart_id=cart_id,
                        email=email or None,
                        total_amount=total_amount,
                        total_weight=cart.aggregate_weight,
                        payment_method=method.value,
                        status=TransactionStatus.COMPLETED.value,
                    )
                )
                recorded = transaction_to_dict(transaction)

            logger.info(
                f"Transaction {recorded['id']} recorded for cart {cart_id}: "
                f"{recorded['total_amount']} via {method.value}"
            )

            deactivate = db_retry(self.deactivate_attempts, self.deactivate_max_wait)(self._deactivate)
            try:
                deactivate(cart_id)
            except SQLAlchemyError as e:
                logger.error(
                    f"Cart {cart_id} left active after transaction {recorded['id']}: {e}"
                )
                raise CheckoutDegraded(
                    f"Transaction {recorded['id']} recorded but cart {cart_id} could not be deactivated",
                    transaction=recorded,
                ) from e

        self._notify(cart_id, "checked_out", transaction_id=recorded["id"])
        return recorded

    def _deactivate(self, cart_id: int):
        try:
            self.carts.update_cart(
                cart_id,
                {"status": CartStatus.INACTIVE.value, "updated_at": _now()},
            )
            self.carts.commit()
        except SQLAlchemyError as e:
            self.carts.rollback()
            logger.warning(f"Deactivating cart {cart_id} failed, retrying: {e}")
            raise

    def resync(self, cart_id: int) -> Dict[str, Any]:
        with self.lock_service.hold(cart_key(cart_id)):
            with self._unit_of_work("resync", cart_id):
                cart = self._load_cart(cart_id)
                weight = self._recompute_weight(cart)
                self.carts.commit()

        self._notify(cart_id, "resynced", aggregate_weight=str(weight))
        return {"cart_id": cart_id, "aggregate_weight": weight}

    def remove_line(self, cart_id: int, line_id: int) -> Dict[str, Any]:
        """Usuwa cala pozycje (bez zwrotu na magazyn) i przelicza wage."""
        with self.lock_service.hold(cart_key(cart_id)):
            with self._unit_of_work("remove_line", cart_id):
                cart = self._load_cart(cart_id)
                line = self.carts.get_line(cart_id, line_id)
                if not line:
                    raise NotFound(f"Line {line_id} not found in cart {cart_id}")

                self.carts.delete_line(line)
                self.carts.flush()

                weight = self._recompute_weight(cart)
                cart.updated_at = _now()
                self.carts.commit()

        logger.info(f"Line {line_id} removed from cart {cart_id}, cart weight {weight}")
        self._notify(cart_id, "line_removed", line_id=line_id, aggregate_weight=str(weight))
        return {"cart_id": cart_id, "aggregate_weight": weight}

    def restock_line(self, cart_id: int, line_id: int) -> Dict[str, Any]:
        """Usuwa pozycje z aktywnego koszyka i oddaje jej ilosc na magazyn."""
        with self.lock_service.hold(cart_key(cart_id)):
            with self._unit_of_work("restock_line", cart_id):
                cart = self._load_active_cart(cart_id)
                line = self.carts.get_line(cart_id, line_id)
                if not line:
                    raise NotFound(f"Line {line_id} not found in cart {cart_id}")

                product_id, quantity = line.product_id, line.quantity
                with self.lock_service.hold(product_key(product_id)):
                    self.catalog.increment_stock(product_id, quantity)
                    self.carts.delete_line(line)
                    self.carts.flush()

                    weight = self._recompute_weight(cart)
                    cart.updated_at = _now()
                    self.carts.commit()

        logger.info(f"Restocked {quantity} x product {product_id} from cart {cart_id}")
        self._notify(cart_id, "line_restocked", line_id=line_id, aggregate_weight=str(weight))
        return {
            "cart_id": cart_id,
            "product_id": product_id,
            "restocked": quantity,
            "aggregate_weight": weight,
        }

    def release_cart(self, cart_id: int, idle_before: datetime | None = None) -> Dict[str, Any]:
        """
        Porzucony koszyk: wszystkie pozycje wracaja na magazyn,
        koszyk jest oprozniany i deaktywowany.

        Z idle_before koszyk ruszony w miedzyczasie (skan po wyborze
        kandydatow) zostaje nietkniety i wynik ma released=False.
        """
        with self.lock_service.hold(cart_key(cart_id)):
            with self._unit_of_work("release_cart", cart_id):
                cart = self._load_active_cart(cart_id)
                if idle_before is not None and _as_utc(cart.updated_at) >= idle_before:
                    self.db.rollback()
                    return {"cart_id": cart_id, "released": False, "restocked": {}}
                lines = self.carts.get_cart_lines(cart_id)

                restocked: Dict[int, int] = {}
                product_keys = [product_key(pid) for pid in sorted({line.product_id for line in lines})]
                with self.lock_service.hold(*product_keys):
                    for line in lines:
                        self.catalog.increment_stock(line.product_id, line.quantity)
                        restocked[line.product_id] = restocked.get(line.product_id, 0) + line.quantity
                        self.carts.delete_line(line)
                    self.carts.flush()

                    weight = self._recompute_weight(cart)
                    cart.status = CartStatus.INACTIVE.value
                    cart.updated_at = _now()
                    self.carts.commit()

        logger.info(f"Cart {cart_id} released, restocked {restocked}")
        self._notify(cart_id, "released", restocked=len(restocked))
        return {"cart_id": cart_id, "released": True, "restocked": restocked, "aggregate_weight": weight}
