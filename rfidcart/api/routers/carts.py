#rfidcart/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from rfidcart.api import get_lock_service, get_notifier
from rfidcart.data.database import get_db
from rfidcart.domain.errors import (
    CartInactive,
    CheckoutDegraded,
    EmptyCart,
    InvalidInput,
    NotFound,
    OutOfStock,
    StorageError,
)
from rfidcart.domain.schemas import (
    CartLineOut,
    CartOut,
    CheckoutIn,
    ScanIn,
    ScanOut,
    TransactionOut,
)
from rfidcart.services.cart_engine import CartEngine
from rfidcart.services.cart_service import CartService
from rfidcart.services.lock_service import LockService
from rfidcart.services.notification_service import NotificationService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return CartService(db=db, lock_service=lock_service)


def get_engine(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notifier: NotificationService = Depends(get_notifier),
):
    return CartEngine(db=db, lock_service=lock_service, notifier=notifier)


@router.post("/", response_model=CartOut, status_code=201)
def create_cart(svc: CartService = Depends(get_service)):
    return svc.create_cart()


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(cart_id: int, svc: CartService = Depends(get_service)):
    cart = svc.get_cart(cart_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@router.get("/{cart_id}/lines", response_model=List[CartLineOut])
def list_cart_lines(cart_id: int, svc: CartService = Depends(get_service)):
    try:
        return svc.list_cart_lines(cart_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{cart_id}/reactivate", response_model=CartOut)
def reactivate_cart(cart_id: int, svc: CartService = Depends(get_service)):
    try:
        return svc.reactivate_cart(cart_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{cart_id}/scan", response_model=ScanOut)
def process_scan(cart_id: int, payload: ScanIn, engine: CartEngine = Depends(get_engine)):
    try:
        return engine.process_scan(cart_id, payload.product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (OutOfStock, CartInactive) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{cart_id}/checkout", response_model=TransactionOut, status_code=201)
def checkout(cart_id: int, payload: CheckoutIn, engine: CartEngine = Depends(get_engine)):
    try:
        return engine.checkout(cart_id, payload.email, payload.payment_method)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (EmptyCart, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CartInactive as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CheckoutDegraded as e:
        #sprzedaz zapisana, koszyk dalej aktywny - klient dostaje transakcje
        return JSONResponse(
            status_code=202,
            content=jsonable_encoder({"detail": str(e), "transaction": e.transaction}),
        )
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{cart_id}/resync")
def resync(cart_id: int, engine: CartEngine = Depends(get_engine)):
    try:
        return engine.resync(cart_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/{cart_id}/lines/{line_id}")
def remove_line(cart_id: int, line_id: int, engine: CartEngine = Depends(get_engine)):
    try:
        return engine.remove_line(cart_id, line_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{cart_id}/lines/{line_id}/restock")
def restock_line(cart_id: int, line_id: int, engine: CartEngine = Depends(get_engine)):
    try:
        return engine.restock_line(cart_id, line_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartInactive as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{cart_id}/release")
def release_cart(cart_id: int, engine: CartEngine = Depends(get_engine)):
    try:
        return engine.release_cart(cart_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartInactive as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
