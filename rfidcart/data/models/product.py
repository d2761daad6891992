#rfidcart/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String

from rfidcart.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    rfid_tag = Column(String, nullable=False, unique=True, index=True)

    unit_price = Column(Numeric(10, 2), nullable=False)
    unit_weight = Column(Numeric(10, 3), nullable=False)
    stock_count = Column(Integer, nullable=False, default=0)
    photo_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("stock_count >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("unit_price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("unit_weight >= 0", name="ck_products_weight_non_negative"),
    )
