# rfidcart/repos/transaction_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session
from rfidcart.data.models.transaction import TransactionModel


class TransactionRepo:
    """Ledger jest append-only: brak update i delete."""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(self, transaction: TransactionModel) -> TransactionModel:
        self.db.add(transaction)
        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def get_transaction(self, transaction_id: int) -> TransactionModel | None:
        return self.db.get(TransactionModel, transaction_id)

    def list_transactions(self, limit: int = 50) -> list[TransactionModel]:
        stmt = (
            select(TransactionModel)
            .order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())
