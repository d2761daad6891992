# rfidcart/services/transaction_service.py
from typing import List

from sqlalchemy.orm import Session

from rfidcart.data.models.transaction import TransactionModel
from rfidcart.domain.errors import NotFound
from rfidcart.repos.transaction_repo import TransactionRepo


class TransactionService:
    """
    Odczyt ledgera transakcji (Query).
    Zapis robi wylacznie CartEngine.checkout.
    """

    def __init__(self, db: Session):
        self.repo = TransactionRepo(db)

    def get_transaction(self, transaction_id: int) -> TransactionModel:
        transaction = self.repo.get_transaction(transaction_id)
        if not transaction:
            raise NotFound(f"Transaction {transaction_id} not found")
        return transaction

    def list_transactions(self, limit: int = 50) -> List[TransactionModel]:
        return self.repo.list_transactions(limit)
