# rfidcart/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List
from decimal import Decimal
from datetime import datetime

from rfidcart.domain.enums import CartStatus, PaymentMethod, TransactionStatus


class ScanIn(BaseModel):
    """Schema dla zdarzenia skanu RFID."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")


class ScanOut(BaseModel):
    cart_id: int
    line_id: int
    line_quantity: int
    line_weight: Decimal
    product_name: str
    aggregate_weight: Decimal


class CheckoutIn(BaseModel):
    """Schema dla finalizacji koszyka."""

    email: EmailStr | None = None
    payment_method: str = Field(..., description="card, UPI albo cash")


class CartLineOut(BaseModel):
    """Pozycja koszyka razem z danymi produktu."""

    id: int
    product_id: int
    product_name: str
    unit_price: Decimal
    unit_weight: Decimal
    quantity: int
    line_weight: Decimal
    created_at: datetime


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    status: CartStatus
    aggregate_weight: Decimal
    lines: List[CartLineOut]
    total: Decimal
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    rfid_tag: str = Field(..., min_length=1, max_length=100)
    unit_price: Decimal = Field(..., ge=0)
    unit_weight: Decimal = Field(..., ge=0)
    stock_count: int = Field(0, ge=0)
    photo_url: str | None = None


class ProductUpdate(BaseModel):
    """Czesciowa aktualizacja produktu - tylko podane pola."""

    name: str | None = Field(None, min_length=1, max_length=200)
    rfid_tag: str | None = Field(None, min_length=1, max_length=100)
    unit_price: Decimal | None = Field(None, ge=0)
    unit_weight: Decimal | None = Field(None, ge=0)
    stock_count: int | None = Field(None, ge=0)
    photo_url: str | None = None


class ProductOut(BaseModel):
    id: int
    name: str
    rfid_tag: str
    unit_price: Decimal
    unit_weight: Decimal
    stock_count: int
    photo_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionOut(BaseModel):
    """Schema dla transakcji (response)."""

    id: int
    cart_id: int
    email: str | None = None
    total_amount: Decimal
    total_weight: Decimal
    payment_method: PaymentMethod
    status: TransactionStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
