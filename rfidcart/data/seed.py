# rfidcart/data/seed.py
from decimal import Decimal

from rfidcart.data.database import SessionLocal
from rfidcart.data.models.product import ProductModel

DEMO_PRODUCTS = [
    {"name": "Milk 1L", "rfid_tag": "E200-0001", "unit_price": Decimal("1.49"), "unit_weight": Decimal("1.030"), "stock_count": 40},
    {"name": "Bread", "rfid_tag": "E200-0002", "unit_price": Decimal("2.20"), "unit_weight": Decimal("0.500"), "stock_count": 25},
    {"name": "Coffee 250g", "rfid_tag": "E200-0003", "unit_price": Decimal("6.99"), "unit_weight": Decimal("0.250"), "stock_count": 15},
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        db.add_all(ProductModel(**data) for data in DEMO_PRODUCTS)
        db.commit()
    finally:
        db.close()
