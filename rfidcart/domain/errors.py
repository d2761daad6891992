# rfidcart/domain/errors.py


class CartEngineError(Exception):
    """Bazowy wyjatek domeny koszyka."""


class NotFound(CartEngineError):
    pass


class OutOfStock(CartEngineError):
    pass


class CartInactive(CartEngineError):
    pass


class EmptyCart(CartEngineError):
    pass


class InvalidInput(CartEngineError):
    pass


class ProductInUse(CartEngineError):
    pass


class CheckoutDegraded(CartEngineError):
    """
    Transakcja zapisana, ale koszyka nie udalo sie deaktywowac.
    Zapis transakcji jest zrodlem prawdy.
    """

    def __init__(self, message: str, transaction: dict):
        super().__init__(message)
        self.transaction = transaction


class StorageError(CartEngineError):
    """Przejsciowy blad bazy/redisa - mozna powtorzyc cale wywolanie."""


class LockTimeout(StorageError):
    pass
