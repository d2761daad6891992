from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from rfidcart.data.models.cart import CartModel
from rfidcart.domain.enums import CartStatus
from rfidcart.domain.errors import NotFound, StorageError
from rfidcart.repos.cart_repo import CartRepo
from rfidcart.services.lock_service import LockService, cart_key
from rfidcart.utils.logging import get_logger

logger = get_logger(__name__)

class CartService:
    """
    Strona odczytu (read model) koszyka dla wyswietlaczy i UI klienta
    oraz cykl zycia koszyka: tworzenie i ponowna aktywacja.
    Zmiany pozycji, wagi i magazynu robi tylko CartEngine.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CartRepo(db)
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, cart_id: int) -> Dict[str, Any] | None:
        cart = self.repo.get_cart(cart_id)

        if not cart:
            return None

        lines = self._lines(cart_id)
        total = sum((l["unit_price"] * l["quantity"] for l in lines), Decimal("0.00"))

        #dict przeksztalcany w jsona
        return {
            "cart_id": cart.id,
            "status": cart.status,
            "aggregate_weight": cart.aggregate_weight,
            "lines": lines,
            "total": total,
            "updated_at": cart.updated_at,
        }

    def list_cart_lines(self, cart_id: int) -> List[Dict[str, Any]]:
        if not self.repo.get_cart(cart_id):
            raise NotFound(f"Cart {cart_id} not found")
        return self._lines(cart_id)

    def _lines(self, cart_id: int) -> List[Dict[str, Any]]:
        return [
            {
                "id": line.id,
                "product_id": line.product_id,
                "product_name": product.name,
                "unit_price": product.unit_price,
                "unit_weight": product.unit_weight,
                "quantity": line.quantity,
                "line_weight": line.line_weight,
                "created_at": line.created_at,
            }
            for line, product in self.repo.get_cart_lines_with_products(cart_id)
        ]

    #commands
    def create_cart(self) -> Dict[str, Any]:
        created = self.repo.create_cart(
            CartModel(
                status=CartStatus.ACTIVE.value,
                aggregate_weight=Decimal("0.000"),
            )
        )

        logger.info(f"Utworzono nowy koszyk {created.id}")

        return {
            "cart_id": created.id,
            "status": created.status,
            "aggregate_weight": created.aggregate_weight,
            "lines": [],
            "total": Decimal("0.00"),
            "updated_at": created.updated_at,
        }

    def reactivate_cart(self, cart_id: int) -> Dict[str, Any]:
        """
        Koszyk fizyczny wraca do obiegu dla nowego klienta.
        Stare pozycje (juz sprzedane) sa czyszczone, waga wraca do 0.
        """
        with self.lock_service.hold(cart_key(cart_id)):
            cart = self.repo.get_cart(cart_id, for_update=True)
            if not cart:
                raise NotFound(f"Cart {cart_id} not found")

            if cart.status == CartStatus.ACTIVE.value:
                return self.get_cart(cart_id)

            try:
                self.repo.delete_cart_lines(cart_id)
                self.repo.update_cart(
                    cart_id,
                    {
                        "status": CartStatus.ACTIVE.value,
                        "aggregate_weight": Decimal("0.000"),
                        "updated_at": datetime.now(timezone.utc),
                    },
                )
                self.repo.commit()
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Reactivating cart {cart_id} failed: {e}")
                raise StorageError("reactivate_cart failed, no changes were applied") from e

        logger.info(f"Koszyk {cart_id} ponownie aktywny")
        return self.get_cart(cart_id)
