from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from datetime import datetime, timezone

from rfidcart.data.database import Base

class TransactionModel(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False, index=True)
    email = Column(String, nullable=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    total_weight = Column(Numeric(10, 3), nullable=False)
    payment_method = Column(String, nullable=False)  # card, UPI, cash
    status = Column(String, nullable=False, default="completed")  # completed, failed, pending
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
