# rfidcart/repos/cart_repo.py
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from rfidcart.data.models.cart import CartModel
from rfidcart.data.models.cart_line import CartLineModel
from rfidcart.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int, for_update: bool = False) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.id == cart_id)
        if for_update:
            #blokada wiersza w postgresie, sqlite ignoruje
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def update_cart(self, cart_id: int, new_data: dict) -> int:
        return (
            self.db.query(CartModel)
            .filter(CartModel.id == cart_id)
            .update(new_data, synchronize_session=False)
        )

    def list_idle_carts(self, status: str, cutoff: datetime) -> list[CartModel]:
        stmt = (
            select(CartModel)
            .where(CartModel.status == status, CartModel.updated_at < cutoff)
            .where(CartModel.lines.any())
            .order_by(CartModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_cart_lines(self, cart_id: int) -> list[CartLineModel]:
        stmt = (
            select(CartLineModel)
            .where(CartLineModel.cart_id == cart_id)
            .order_by(CartLineModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_cart_lines_with_products(self, cart_id: int) -> list[tuple[CartLineModel, ProductModel]]:
        stmt = (
            select(CartLineModel, ProductModel)
            .join(ProductModel, ProductModel.id == CartLineModel.product_id)
            .where(CartLineModel.cart_id == cart_id)
            .order_by(CartLineModel.created_at, CartLineModel.id)
        )
        return [(line, product) for line, product in self.db.execute(stmt).all()]

    def get_cart_line(self, cart_id: int, product_id: int) -> CartLineModel | None:
        stmt = select(CartLineModel).where(
            CartLineModel.cart_id == cart_id,
            CartLineModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_line(self, cart_id: int, line_id: int) -> CartLineModel | None:
        stmt = select(CartLineModel).where(
            CartLineModel.id == line_id,
            CartLineModel.cart_id == cart_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_cart_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        return line

    def delete_line(self, line: CartLineModel) -> None:
        self.db.delete(line)

    def delete_cart_lines(self, cart_id: int) -> int:
        return (
            self.db.query(CartLineModel)
            .filter(CartLineModel.cart_id == cart_id)
            .delete(synchronize_session=False)
        )

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
