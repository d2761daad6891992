# rfidcart/repos/catalog_repo.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rfidcart.data.models.cart_line import CartLineModel
from rfidcart.data.models.product import ProductModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product_by_tag(self, rfid_tag: str) -> ProductModel | None:
        stmt = select(ProductModel).where(ProductModel.rfid_tag == rfid_tag)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_products(self) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def decrement_stock(self, product_id: int) -> int:
        #warunkowy update - 0 rows affected znaczy brak towaru
        return (
            self.db.query(ProductModel)
            .filter(ProductModel.id == product_id, ProductModel.stock_count > 0)
            .update(
                {ProductModel.stock_count: ProductModel.stock_count - 1},
                synchronize_session=False,
            )
        )

    def increment_stock(self, product_id: int, quantity: int) -> int:
        return (
            self.db.query(ProductModel)
            .filter(ProductModel.id == product_id)
            .update(
                {ProductModel.stock_count: ProductModel.stock_count + quantity},
                synchronize_session=False,
            )
        )

    def count_lines_for_product(self, product_id: int) -> int:
        stmt = select(func.count(CartLineModel.id)).where(CartLineModel.product_id == product_id)
        return self.db.execute(stmt).scalar_one()

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
