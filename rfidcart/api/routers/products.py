# rfidcart/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from rfidcart.api import get_lock_service
from rfidcart.data.database import get_db
from rfidcart.domain.errors import InvalidInput, NotFound, ProductInUse, StorageError
from rfidcart.domain.schemas import ProductIn, ProductOut, ProductUpdate
from rfidcart.services.catalog_service import CatalogService
from rfidcart.services.lock_service import LockService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return CatalogService(db, lock_service)


@router.get("/", response_model=List[ProductOut])
def list_products(svc: CatalogService = Depends(get_service)):
    return svc.list_products()


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, svc: CatalogService = Depends(get_service)):
    try:
        return svc.create_product(payload.model_dump())
    except InvalidInput as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/by-tag/{rfid_tag}", response_model=ProductOut)
def get_product_by_tag(rfid_tag: str, svc: CatalogService = Depends(get_service)):
    try:
        return svc.get_product_by_tag(rfid_tag)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: CatalogService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, svc: CatalogService = Depends(get_service)):
    try:
        return svc.update_product(product_id, payload.model_dump(exclude_unset=True))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, svc: CatalogService = Depends(get_service)):
    try:
        svc.delete_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProductInUse as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return Response(status_code=204)
