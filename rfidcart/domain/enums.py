# rfidcart/domain/enums.py
from enum import Enum


class CartStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "UPI"
    CASH = "cash"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    PENDING = "pending"
