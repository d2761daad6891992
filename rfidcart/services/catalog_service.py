# rfidcart/services/catalog_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rfidcart.data.models.product import ProductModel
from rfidcart.domain.errors import InvalidInput, NotFound, ProductInUse, StorageError
from rfidcart.repos.catalog_repo import CatalogRepo
from rfidcart.services.lock_service import LockService, product_key
from rfidcart.utils.logging import get_logger

logger = get_logger(__name__)

_EDITABLE_FIELDS = ("name", "rfid_tag", "unit_price", "unit_weight", "stock_count", "photo_url")


class CatalogService:
    """
    Zarzadzanie katalogiem (panel admina).
    Zmiana stanu magazynu idzie pod lockiem produktu, tak jak skan.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CatalogRepo(db)
        self.lock_service = lock_service

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product

    def get_product_by_tag(self, rfid_tag: str) -> ProductModel:
        product = self.repo.get_product_by_tag(rfid_tag)
        if not product:
            raise NotFound(f"No product with RFID tag {rfid_tag}")
        return product

    def list_products(self) -> List[ProductModel]:
        return self.repo.list_products()

    def create_product(self, data: Dict[str, Any]) -> ProductModel:
        try:
            created = self.repo.create_product(ProductModel(**data))
        except IntegrityError:
            self.repo.rollback()
            raise InvalidInput(f"RFID tag {data.get('rfid_tag')} is already registered")
        except SQLAlchemyError as e:
            self._storage_failure("create_product", e)

        logger.info(f"Product {created.id} ({created.name}) added to catalog")
        return created

    def update_product(self, product_id: int, changes: Dict[str, Any]) -> ProductModel:
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown product fields: {sorted(unknown)}")

        with self.lock_service.hold(product_key(product_id)):
            product = self.get_product(product_id)
            for field, value in changes.items():
                setattr(product, field, value)
            try:
                self.repo.commit()
            except IntegrityError:
                self.repo.rollback()
                raise InvalidInput(f"RFID tag {changes.get('rfid_tag')} is already registered")
            except SQLAlchemyError as e:
                self._storage_failure("update_product", e)

        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        with self.lock_service.hold(product_key(product_id)):
            product = self.get_product(product_id)
            if self.repo.count_lines_for_product(product_id):
                raise ProductInUse(f"Product {product_id} is still in a cart")
            try:
                self.repo.delete_product(product)
            except SQLAlchemyError as e:
                self._storage_failure("delete_product", e)

        logger.info(f"Product {product_id} removed from catalog")

    def _storage_failure(self, operation: str, error: SQLAlchemyError):
        self.repo.rollback()
        logger.error(f"{operation} failed: {error}")
        raise StorageError(f"{operation} failed, no changes were applied") from error
