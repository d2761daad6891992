# rfidcart/api/routers/transactions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from rfidcart.data.database import get_db
from rfidcart.domain.errors import NotFound
from rfidcart.domain.schemas import TransactionOut
from rfidcart.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def get_service(db: Session):
    return TransactionService(db)


@router.get("/", response_model=List[TransactionOut])
def list_transactions(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """
    Ostatnie transakcje, najnowsze pierwsze.
    """
    return get_service(db).list_transactions(limit)


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_transaction(transaction_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
